"""
헬스체크 HTTP 서버

게시된 리소스 세대와 마지막 리로드 결과를 노출하는 간단한 HTTP 서버.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from aiohttp import web

if TYPE_CHECKING:
    from .orchestrator import ReloadOrchestrator

logger = logging.getLogger(__name__)


class HealthServer:
    """헬스체크 HTTP 서버

    aiohttp를 사용하여 리소스 상태를 노출합니다.
    """

    def __init__(self, orchestrator: "ReloadOrchestrator", port: int = 8080):
        """
        Args:
            orchestrator: 상태 참조용 오케스트레이터
            port: 리슨 포트
        """
        self.orchestrator = orchestrator
        self.port = port
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self.site: web.TCPSite | None = None
        self.started_at = datetime.now(timezone.utc)

        # 라우트 등록
        self.app.router.add_get("/health", self._health_handler)
        self.app.router.add_post("/reload", self._reload_handler)

    def status(self) -> dict:
        """현재 상태

        Returns:
            {
                "status": "ok" | "degraded" | "empty",
                "generation": 3,
                "config_hash": "...",
                "loaded_at": "ISO8601" | null,
                "reloading": false,
                "last_error": "..." | null,
                "runs": 4,
                "failures": 1,
                "uptime_seconds": 1234
            }
        """
        snapshot = self.orchestrator.store.snapshot
        last_error = self.orchestrator.last_error
        uptime = (datetime.now(timezone.utc) - self.started_at).total_seconds()

        if snapshot.generation == 0:
            state = "empty"
        elif last_error is not None:
            # 마지막 리로드 실패, 이전 리소스로 서비스 중
            state = "degraded"
        else:
            state = "ok"

        return {
            "status": state,
            "generation": snapshot.generation,
            "config_hash": snapshot.client_config_hash,
            "loaded_at": (
                snapshot.loaded_at.isoformat() if snapshot.generation else None
            ),
            "reloading": self.orchestrator.in_flight,
            "last_error": str(last_error) if last_error is not None else None,
            "runs": self.orchestrator.runs,
            "failures": self.orchestrator.failures,
            "uptime_seconds": int(uptime),
        }

    async def _health_handler(self, request: web.Request) -> web.Response:
        """GET /health"""
        return web.json_response(self.status())

    async def _reload_handler(self, request: web.Request) -> web.Response:
        """POST /reload - 수동 리로드"""
        error = await self.orchestrator.reload_hot_resources()
        status_code = 200 if error is None else 500
        return web.json_response(self.status(), status=status_code)

    async def start(self) -> None:
        """헬스 서버 시작"""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, "0.0.0.0", self.port)
        await self.site.start()

        logger.info(f"[Health] 헬스 서버 시작: http://0.0.0.0:{self.port}/health")

    async def stop(self) -> None:
        """헬스 서버 종료"""
        if self.site:
            await self.site.stop()
            self.site = None

        if self.runner:
            await self.runner.cleanup()
            self.runner = None

        logger.info("[Health] 헬스 서버 종료 완료")
