"""
리소스 서버 메인 엔트리포인트

- 시작 시 리소스 전체 빌드 (실패하면 시작 중단)
- 파일 변경 감지 시 핫 리로드
- 헬스 서버
- 우아한 종료 처리
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

# .env 파일 로드 (프로젝트 루트)
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from .health import HealthServer
from .orchestrator import ReloadOrchestrator
from .settings import ResourceSettings
from .watcher import ResourceWatcher

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class ResourceServer:
    """핫 리소스 서버

    오케스트레이터, 파일 감시자, 헬스 서버의 수명 주기를 관리합니다.
    """

    def __init__(self, settings: ResourceSettings):
        """
        Args:
            settings: 리소스 설정
        """
        self.settings = settings
        self.orchestrator = ReloadOrchestrator.from_settings(settings)
        self.watcher = ResourceWatcher(
            self.orchestrator,
            [settings.resolve(p) for p in settings.watch_paths],
            debounce_seconds=settings.reload_debounce,
        )
        self.health_server = HealthServer(self.orchestrator, settings.health_port)
        self._stopped = asyncio.Event()

    @property
    def store(self):
        return self.orchestrator.store

    async def start(self) -> None:
        """서버 시작

        최초 리로드, 시그널 핸들러 등록, 감시자/헬스 서버 시작 후 종료 신호까지 대기.
        """
        logger.info(f"[Server] 리소스 서버 시작: root={self.settings.root_dir}")

        # 최초 빌드 실패 시 게시할 리소스가 없으므로 시작 중단
        await self.orchestrator.reload()

        if sys.platform != "win32":
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(
                    sig, lambda: asyncio.create_task(self.shutdown())
                )
        else:
            signal.signal(
                signal.SIGINT, lambda s, f: asyncio.create_task(self.shutdown())
            )

        self.watcher.start()
        await self.health_server.start()

        await self._stopped.wait()

    async def shutdown(self) -> None:
        """우아한 종료"""
        logger.info("[Server] 종료 신호 수신, 우아한 종료 시작...")
        self.watcher.stop()
        await self.health_server.stop()
        self._stopped.set()
        logger.info("[Server] 종료 완료")


# ============================================================================
# 엔트리포인트
# ============================================================================


def run() -> None:
    """서버 실행 (엔트리포인트)

    환경변수에서 설정을 로드하고 서버를 시작합니다.
    """
    logger.info("=" * 60)
    logger.info("Hot Resource Server")
    logger.info("=" * 60)

    settings = ResourceSettings.from_env_validated(strict=True)

    logger.info(f"Resource Root: {settings.root_dir}")
    logger.info(f"Hot Config: {settings.hot_config_path}")
    logger.info(f"Watch Paths: {settings.watch_paths}")
    logger.info(f"Health Port: {settings.health_port}")

    async def main() -> None:
        server = ResourceServer(settings)
        await server.start()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("[Server] KeyboardInterrupt 수신, 종료 중...")
    except Exception as e:
        logger.error(f"[Server] 예상치 못한 에러: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    run()
