"""
파일 시스템 감시 기반 핫 리로드 트리거

watchdog으로 템플릿/핫 설정 경로의 변경을 감지하고, 디바운스 후 오케스트레이터 리로드를 실행합니다.
"""

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

if TYPE_CHECKING:
    from .orchestrator import ReloadOrchestrator

logger = logging.getLogger(__name__)


class _ReloadHandler(FileSystemEventHandler):
    """watchdog 이벤트 → ResourceWatcher (옵저버 스레드에서 호출됨)"""

    def __init__(self, watcher: "ResourceWatcher"):
        self.watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in ("opened", "closed", "closed_no_write"):
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if any(path and self.watcher.matches(str(path)) for path in paths):
            logger.debug(f"[Watcher] 변경 감지: {event.event_type} {event.src_path}")
            self.watcher.schedule_reload()


class ResourceWatcher:
    """리소스 경로 감시자

    사용법:
        ```python
        watcher = ResourceWatcher(orchestrator, [Path("tmpl"), Path("config/hot.yaml")])
        watcher.start()

        # 종료 시
        watcher.stop()
        ```
    """

    def __init__(
        self,
        orchestrator: "ReloadOrchestrator",
        watch_paths: list[Path],
        debounce_seconds: float = 1.0,
    ):
        """
        Args:
            orchestrator: 리로드를 실행할 오케스트레이터
            watch_paths: 감시할 디렉토리(재귀) 또는 파일 목록
            debounce_seconds: 디바운스 시간 (초)
        """
        self.orchestrator = orchestrator
        self.watch_paths = [Path(p).resolve() for p in watch_paths]
        self.debounce_seconds = debounce_seconds
        self._observer: Observer | None = None
        self._debounce_task: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def matches(self, path: str) -> bool:
        """감시 대상 경로인지 (디렉토리 하위 또는 파일 자체)"""
        candidate = Path(path).resolve()
        for watched in self.watch_paths:
            if candidate == watched or watched in candidate.parents:
                return True
        return False

    def start(self) -> None:
        """파일 감시 시작 (이벤트 루프 안에서 호출)"""
        self._loop = asyncio.get_running_loop()
        handler = _ReloadHandler(self)
        self._observer = Observer()

        watched_dirs: dict[str, bool] = {}
        for path in self.watch_paths:
            if path.is_dir():
                watched_dirs[str(path)] = True
            elif path.parent.is_dir():
                # 파일은 상위 디렉토리를 비재귀로 감시하고 이벤트 경로로 필터링
                watched_dirs.setdefault(str(path.parent), False)
            else:
                logger.warning(f"[Watcher] 감시 경로 없음: {path}")

        for directory, recursive in watched_dirs.items():
            self._observer.schedule(handler, directory, recursive=recursive)

        self._observer.start()
        logger.info(f"[Watcher] 파일 감시 시작: {list(watched_dirs)}")

    def stop(self) -> None:
        """파일 감시 중지"""
        if self._debounce_task:
            self._debounce_task.cancel()
            self._debounce_task = None
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None
            logger.info("[Watcher] 파일 감시 중지")

    def schedule_reload(self) -> None:
        """디바운스 리로드 예약 (어느 스레드에서든 호출 가능)"""
        if self._loop and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._restart_debounce)

    def _restart_debounce(self) -> None:
        # 대기 중인 디바운스만 취소, 실행 중인 리로드는 취소하지 않음
        if self._debounce_task:
            self._debounce_task.cancel()
        self._debounce_task = asyncio.create_task(self._debounced_reload())

    async def _debounced_reload(self) -> None:
        """디바운스 후 리로드 실행"""
        try:
            await asyncio.sleep(self.debounce_seconds)
        except asyncio.CancelledError:
            return
        self._debounce_task = None

        logger.info("[Watcher] 리소스 리로드 실행")
        error = await self.orchestrator.reload_hot_resources()
        if error is not None:
            logger.error(f"[Watcher] 리로드 실패, 이전 리소스 계속 사용: {error}")
