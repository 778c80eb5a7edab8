"""
설정 관리 모듈

정적 서버 설정 로드와 핫 설정 리로드(ConfigMerger)를 담당합니다.
"""

from .config_manager import (
    CLIENT_CONFIG_KEYS,
    CLIENT_HOT_KEYS,
    ConfigMerger,
    HotConfigCandidate,
    load_server_config,
    serialize,
)

__all__ = [
    "CLIENT_CONFIG_KEYS",
    "CLIENT_HOT_KEYS",
    "ConfigMerger",
    "HotConfigCandidate",
    "load_server_config",
    "serialize",
]
