"""
핫 리소스 리로드 오케스트레이터

리로드 순서:
    1. 핫 설정 리로드 (ConfigMerger)
    2~5. 동시 실행
        2. 관리자 클라이언트 번들 읽기 (mod.js, mod.js.map)
        3. vendor 번들 해시
        4. CSS 파일 해시
        5. 클라이언트 번들 해시 (언어별 번들 포함)
    6. 템플릿 컴파일 (404, 50x, 언어별 index)

모든 결과는 임시 구조에 모은 뒤 성공 시에만 ResourceStore에 한 번에 게시합니다.
어느 단계든 실패하면 이전 스냅샷이 그대로 유지되고 에러가 호출자에게 전달됩니다.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from config.config_manager import ConfigMerger, load_server_config
from lib.errors import ReloadStep, ResourceError
from lib.hashing import ContentHasher
from lib.pack_loader import LanguagePackLoader, load_options
from lib.sources import gather_all, read_text
from lib.template_compiler import TemplateCompiler
from lib.types import AssetHash, OptionDescriptor, ResourceSnapshot, freeze

from .settings import ResourceSettings
from .store import ResourceStore

logger = logging.getLogger(__name__)


class ReloadOrchestrator:
    """리로드 파이프라인 실행 및 게시

    한 번에 하나의 리로드만 실행됩니다 (single-flight).
    실행 중에 들어온 요청들은 끝난 뒤 딱 한 번의 후속 리로드로 합쳐지고,
    합쳐진 호출자들은 모두 그 리로드의 결과(스냅샷 또는 에러)를 받습니다.
    """

    def __init__(
        self,
        settings: ResourceSettings,
        merger: ConfigMerger,
        store: ResourceStore | None = None,
        hasher: ContentHasher | None = None,
        pack_loader: LanguagePackLoader | None = None,
    ):
        """
        Args:
            settings: 경로 설정
            merger: 설정 병합기
            store: 게시 대상 저장소 (기본값: 새 ResourceStore)
        """
        self.settings = settings
        self.merger = merger
        self.store = store or ResourceStore()
        self.hasher = hasher or ContentHasher()
        self.pack_loader = pack_loader or LanguagePackLoader(
            settings.resolve(settings.lang_dir)
        )

        self._lock = asyncio.Lock()
        self._requested = 0
        self._completed = 0
        self._last_error: Exception | None = None

        self.runs = 0
        self.failures = 0

    @classmethod
    def from_settings(cls, settings: ResourceSettings) -> "ReloadOrchestrator":
        """설정에서 정적 서버 설정을 로드하여 생성"""
        server_config = load_server_config(
            settings.resolve(settings.server_config_path)
        )
        merger = ConfigMerger(server_config, settings.resolve(settings.hot_config_path))
        return cls(settings, merger)

    @property
    def last_error(self) -> Exception | None:
        """마지막 리로드 에러 (성공 시 None)"""
        return self._last_error

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def reload(self) -> ResourceSnapshot:
        """리로드 실행 (실행 중이면 후속 리로드에 합류)

        Returns:
            게시된 ResourceSnapshot

        Raises:
            ResourceError: 파이프라인 단계 실패 (게시 상태는 변경되지 않음)
        """
        self._requested += 1
        ticket = self._requested

        async with self._lock:
            if self._completed >= ticket:
                # 대기 중에 이 요청을 포함하는 리로드가 이미 끝남
                logger.debug(f"[Orchestrator] 리로드 요청 병합: #{ticket}")
                if self._last_error is not None:
                    raise self._last_error
                return self.store.snapshot

            target = self._requested
            self.runs += 1
            try:
                snapshot = await self._run_pipeline()
            except Exception as e:
                self._completed = target
                self._last_error = e
                self.failures += 1
                logger.error(
                    f"[Orchestrator] 리로드 실패, 이전 리소스 유지 "
                    f"(generation={self.store.generation}): {e}"
                )
                raise

            self._completed = target
            self._last_error = None
            return snapshot

    async def reload_hot_resources(
        self, callback: Callable[[Exception | None], Any] | None = None
    ) -> Exception | None:
        """콜백 방식 트리거 (파일 감시자 등 외부 호출용)

        Returns:
            실패 시 에러, 성공 시 None
        """
        error: Exception | None = None
        try:
            await self.reload()
        except Exception as e:
            error = e

        if callback is not None:
            result = callback(error)
            if asyncio.iscoroutine(result):
                await result
        return error

    async def _run_pipeline(self) -> ResourceSnapshot:
        generation = self.store.generation + 1
        logger.info(f"[Orchestrator] 리로드 시작: generation={generation}")

        # 1. 핫 설정
        candidate = await self._step(
            ReloadStep.HOT_CONFIG, self.merger.reload_hot_config()
        )
        hot = candidate.hot
        langs = self.merger.langs

        # 2~5. 서로 독립적인 읽기/해시 작업
        mod_files, vendor_hash, css_hash, client_hash = await self._gather(
            (ReloadStep.MOD_CLIENT, self._read_mod_client()),
            (
                ReloadStep.VENDOR_HASH,
                self.hasher.hash_file(self.settings.vendor_bundle),
            ),
            (ReloadStep.CSS_HASH, self._hash_css()),
            (
                ReloadStep.CLIENT_HASH,
                self.hasher.hash_files(
                    "client_hash", self.settings.client_bundles(langs)
                ),
            ),
        )
        hot["vendor_hash"] = vendor_hash
        hot["css_hash"] = css_hash.digest
        hot["client_hash"] = client_hash.digest

        # 6. 템플릿 (해시가 포함된 핫 설정 사용)
        resources, artifacts = await self._step(
            ReloadStep.TEMPLATES, self._build_templates(hot, langs)
        )
        resources.update(mod_files)

        snapshot = ResourceSnapshot(
            generation=generation,
            hot=freeze(hot),
            client_config=self.merger.client_config,
            client_hot_config=freeze(candidate.client_hot_config),
            client_config_hash=candidate.client_config_hash,
            resources=freeze(resources),
            artifacts=freeze(artifacts),
        )
        self.store.publish(snapshot)

        logger.info(
            f"[Orchestrator] 리로드 완료: generation={generation}, "
            f"config_hash={snapshot.client_config_hash}, "
            f"vendor={vendor_hash[:8]}, css={css_hash.digest[:8]}, "
            f"client={client_hash.digest[:8]}"
        )
        return snapshot

    async def _step(self, step: ReloadStep, job: Awaitable[Any]) -> Any:
        """단계 실행, 실패 시 에러에 단계 정보 기록"""
        try:
            return await job
        except ResourceError as e:
            if e.step is None:
                e.step = step
            raise

    async def _gather(self, *jobs: tuple[ReloadStep, Awaitable[Any]]) -> list[Any]:
        """독립 단계 동시 실행 (모두 끝난 뒤 첫 번째 에러 전달)"""
        return await gather_all(*(self._step(step, job) for step, job in jobs))

    async def _read_mod_client(self) -> dict[str, str]:
        mod_js, mod_sourcemap = await gather_all(
            read_text(self.settings.mod_bundle),
            read_text(self.settings.mod_sourcemap),
        )
        return {"modJs": mod_js, "modSourcemap": mod_sourcemap}

    async def _hash_css(self) -> AssetHash:
        files = await self.hasher.list_files(self.settings.css_dir, ".css")
        return await self.hasher.hash_files("css_hash", files)

    async def _load_options(self) -> list[OptionDescriptor]:
        path = self.settings.resolve(self.settings.options_path)
        if not path.exists():
            return []
        return await load_options(path, self.merger.server_config)

    async def _build_templates(
        self, hot: dict[str, Any], langs: list[str]
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        index, not_found, server_error, packs, options = await gather_all(
            read_text(self.settings.index_template),
            read_text(self.settings.not_found_page),
            read_text(self.settings.server_error_page),
            self.pack_loader.load_all(langs),
            self._load_options(),
        )
        compiler = TemplateCompiler(options)
        return compiler.expand_templates(
            {"index": index, "notFound": not_found, "serverError": server_error},
            hot,
            self.merger.server_config,
            packs,
        )
