"""
핫 리소스 서버 모듈

리로드 오케스트레이터, 리소스 저장소, 파일 감시자, 헬스 서버.
"""

from .health import HealthServer
from .main import ResourceServer, run
from .orchestrator import ReloadOrchestrator
from .settings import ConfigurationError, ResourceSettings
from .store import ResourceStore
from .watcher import ResourceWatcher

__all__ = [
    "ConfigurationError",
    "ResourceSettings",
    "ResourceStore",
    "ReloadOrchestrator",
    "ResourceWatcher",
    "HealthServer",
    "ResourceServer",
    "run",
]
