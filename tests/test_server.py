"""
서버 구성요소 테스트

ResourceSettings, ResourceStore, ResourceWatcher, HealthServer.
"""

import asyncio
import json
import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from lib.types import ResourceSnapshot
from server.health import HealthServer
from server.settings import ConfigurationError, ResourceSettings
from server.store import ResourceStore
from server.watcher import ResourceWatcher


class TestResourceSettings:
    """ResourceSettings 테스트"""

    def test_from_env(self):
        with patch.dict(
            os.environ,
            {
                "RESOURCE_ROOT": "/srv/site",
                "HOT_CONFIG_PATH": "conf/hot.yaml",
                "WATCH_PATHS": "tmpl, conf/hot.yaml ,",
                "RELOAD_DEBOUNCE": "0.5",
                "HEALTH_PORT": "9090",
            },
        ):
            settings = ResourceSettings.from_env()

        assert settings.root_dir == "/srv/site"
        assert settings.hot_config_path == "conf/hot.yaml"
        assert settings.watch_paths == ["tmpl", "conf/hot.yaml"]
        assert settings.reload_debounce == 0.5
        assert settings.health_port == 9090

    def test_default_watch_paths(self):
        with patch.dict(os.environ, {"WATCH_PATHS": ""}):
            settings = ResourceSettings.from_env()

        assert settings.watch_paths == ["tmpl", "config/hot.yaml"]

    def test_client_bundle_order(self):
        """고정 번들 다음 언어별 번들 (설정 순서)"""
        settings = ResourceSettings(root_dir="/srv")

        bundles = settings.client_bundles(["ru", "en_GB"])

        assert [p.name for p in bundles] == [
            "client.js",
            "loader.js",
            "login.js",
            "setup.js",
            "ru.js",
            "en_GB.js",
        ]
        assert bundles[-1] == Path("/srv/www/js/lang/en_GB.js")

    def test_validate_ok(self, settings):
        assert settings.validate(strict=True) == []

    def test_validate_missing_files(self):
        settings = ResourceSettings(root_dir="/nonexistent/root")

        with pytest.raises(ConfigurationError):
            settings.validate(strict=True)

        problems = settings.validate(strict=False)
        assert any("리소스 루트" in p for p in problems)

    def test_validate_bad_port(self, settings):
        settings.health_port = 70000

        with pytest.raises(ConfigurationError, match="health_port"):
            settings.validate()


class TestResourceStore:
    """ResourceStore 테스트"""

    def test_initially_empty(self):
        store = ResourceStore()

        assert store.generation == 0
        assert store.get("modJs") is None
        assert "modJs" not in store
        assert store.client_config_hash == ""

    def test_empty_snapshot_defaults(self):
        """기본값은 인스턴스마다 새 읽기 전용 매핑"""
        first = ResourceSnapshot()
        second = ResourceSnapshot()

        assert dict(first.resources) == {}
        assert dict(first.hot) == {}
        assert first.get("modJs") is None
        assert first.resources is not second.resources
        with pytest.raises(TypeError):
            first.resources["modJs"] = "x"

    def test_publish_swaps_snapshot(self):
        store = ResourceStore()
        snapshot = ResourceSnapshot(generation=1, resources={"modJs": "x"})

        store.publish(snapshot)

        assert store.snapshot is snapshot
        assert store["modJs"] == "x"

    def test_rejects_stale_generation(self):
        store = ResourceStore()
        store.publish(ResourceSnapshot(generation=2))

        with pytest.raises(ValueError):
            store.publish(ResourceSnapshot(generation=2))


class TestResourceWatcher:
    """ResourceWatcher 테스트"""

    def test_matches(self, resource_root):
        watcher = ResourceWatcher(
            MagicMock(),
            [resource_root / "tmpl", resource_root / "config" / "hot.yaml"],
        )

        assert watcher.matches(str(resource_root / "tmpl" / "index.html"))
        assert watcher.matches(str(resource_root / "config" / "hot.yaml"))
        assert not watcher.matches(str(resource_root / "config" / "server.yaml"))
        assert not watcher.matches(str(resource_root / "www" / "404.html"))

    @pytest.mark.asyncio
    async def test_debounced_reload(self):
        """연속 이벤트는 리로드 1회로"""
        orchestrator = MagicMock()
        orchestrator.reload_hot_resources = AsyncMock(return_value=None)
        watcher = ResourceWatcher(orchestrator, [], debounce_seconds=0.05)
        watcher._loop = asyncio.get_running_loop()

        for _ in range(3):
            watcher.schedule_reload()
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.2)

        orchestrator.reload_hot_resources.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_reload_logged(self, caplog):
        orchestrator = MagicMock()
        orchestrator.reload_hot_resources = AsyncMock(
            return_value=RuntimeError("boom")
        )
        watcher = ResourceWatcher(orchestrator, [], debounce_seconds=0)

        await watcher._debounced_reload()

        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_start_stop(self, resource_root):
        """실제 watchdog 옵저버 시작/중지"""
        watcher = ResourceWatcher(
            MagicMock(),
            [resource_root / "tmpl", resource_root / "config" / "hot.yaml"],
        )

        watcher.start()
        watcher.stop()

        assert watcher._observer is None


class TestHealthServer:
    """HealthServer 테스트"""

    @pytest.mark.asyncio
    async def test_status_lifecycle(self, orchestrator, resource_root):
        """empty → ok → degraded"""
        health = HealthServer(orchestrator)
        assert health.status()["status"] == "empty"

        await orchestrator.reload()
        status = health.status()
        assert status["status"] == "ok"
        assert status["generation"] == 1
        assert status["config_hash"] == orchestrator.store.client_config_hash

        (resource_root / "config" / "hot.yaml").write_text("cold: {}\n")
        await orchestrator.reload_hot_resources()
        status = health.status()
        assert status["status"] == "degraded"
        assert status["generation"] == 1
        assert "hot" in status["last_error"]
        assert status["failures"] == 1

    @pytest.mark.asyncio
    async def test_health_handler(self, orchestrator):
        await orchestrator.reload()
        health = HealthServer(orchestrator)

        response = await health._health_handler(MagicMock())

        body = json.loads(response.text)
        assert body["status"] == "ok"
        assert body["reloading"] is False

    @pytest.mark.asyncio
    async def test_reload_handler(self, orchestrator):
        health = HealthServer(orchestrator)

        response = await health._reload_handler(MagicMock())

        assert response.status == 200
        assert json.loads(response.text)["generation"] == 1
