"""
리소스 서버 설정

환경변수 기반 경로/동작 설정.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """설정 오류 예외"""

    pass


# 클라이언트 번들 (언어별 번들은 lang/<lang>.js로 추가됨)
CLIENT_BUNDLES = ("client.js", "loader.js", "login.js", "setup.js")


@dataclass
class ResourceSettings:
    """리소스 파이프라인 설정

    모든 상대 경로는 root_dir 기준입니다.
    """

    root_dir: str = "."

    # 설정 파일
    server_config_path: str = "config/server.yaml"
    hot_config_path: str = "config/hot.yaml"
    options_path: str = "config/options.yaml"
    lang_dir: str = "config/lang"

    # 리소스 디렉토리
    www_dir: str = "www"
    tmpl_dir: str = "tmpl"
    state_dir: str = "state"

    # 변경 시 리로드를 트리거하는 경로
    watch_paths: list[str] = field(
        default_factory=lambda: ["tmpl", "config/hot.yaml"]
    )
    reload_debounce: float = 1.0  # 초

    # 헬스 서버
    health_port: int = 8080

    @classmethod
    def from_env(cls) -> "ResourceSettings":
        """환경변수에서 설정 로드"""
        watch_paths_str = os.getenv("WATCH_PATHS", "")
        watch_paths = [p.strip() for p in watch_paths_str.split(",") if p.strip()]

        return cls(
            root_dir=os.getenv("RESOURCE_ROOT", "."),
            server_config_path=os.getenv("SERVER_CONFIG_PATH", "config/server.yaml"),
            hot_config_path=os.getenv("HOT_CONFIG_PATH", "config/hot.yaml"),
            options_path=os.getenv("OPTIONS_PATH", "config/options.yaml"),
            lang_dir=os.getenv("LANG_DIR", "config/lang"),
            www_dir=os.getenv("WWW_DIR", "www"),
            tmpl_dir=os.getenv("TMPL_DIR", "tmpl"),
            state_dir=os.getenv("STATE_DIR", "state"),
            reload_debounce=float(os.getenv("RELOAD_DEBOUNCE", "1.0")),
            health_port=int(os.getenv("HEALTH_PORT", "8080")),
            watch_paths=(
                watch_paths
                if watch_paths
                else cls.__dataclass_fields__["watch_paths"].default_factory()
            ),
        )

    def resolve(self, *parts: str) -> Path:
        """root_dir 기준 경로"""
        return Path(self.root_dir).joinpath(*parts)

    # 파이프라인 입력 경로

    @property
    def vendor_bundle(self) -> Path:
        return self.resolve(self.www_dir, "js", "vendor.js")

    @property
    def css_dir(self) -> Path:
        return self.resolve(self.www_dir, "css")

    def client_bundles(self, langs: list[str]) -> list[Path]:
        """클라이언트 번들 + 언어별 번들 (해시 순서 고정)"""
        js_dir = self.resolve(self.www_dir, "js")
        bundles = [js_dir / name for name in CLIENT_BUNDLES]
        bundles.extend(js_dir / "lang" / f"{lang}.js" for lang in langs)
        return bundles

    @property
    def index_template(self) -> Path:
        return self.resolve(self.tmpl_dir, "index.html")

    @property
    def not_found_page(self) -> Path:
        return self.resolve(self.www_dir, "404.html")

    @property
    def server_error_page(self) -> Path:
        return self.resolve(self.www_dir, "50x.html")

    @property
    def mod_bundle(self) -> Path:
        return self.resolve(self.state_dir, "mod.js")

    @property
    def mod_sourcemap(self) -> Path:
        return self.resolve(self.state_dir, "mod.js.map")

    def validate(self, strict: bool = True) -> list[str]:
        """설정값 검증

        Args:
            strict: True면 오류 시 예외 발생, False면 경고만

        Returns:
            list[str]: 검증 경고/오류 메시지 목록

        Raises:
            ConfigurationError: strict=True이고 오류가 있을 때
        """
        errors = []
        warnings = []

        if not Path(self.root_dir).is_dir():
            errors.append(f"리소스 루트 디렉토리 없음: {self.root_dir}")

        for name in ("server_config_path", "hot_config_path"):
            path = self.resolve(getattr(self, name))
            if not path.exists():
                errors.append(f"설정 파일 없음: {path}")

        if not self.resolve(self.options_path).exists():
            warnings.append(f"옵션 파일 없음 (옵션 패널 비어 있음): {self.options_path}")

        for watch_path in self.watch_paths:
            if not self.resolve(watch_path).exists():
                warnings.append(f"감시 경로 없음: {watch_path}")

        if self.reload_debounce < 0:
            errors.append(f"잘못된 reload_debounce 값: {self.reload_debounce}")

        if not 0 < self.health_port < 65536:
            errors.append(f"잘못된 health_port 값: {self.health_port}")

        for warning in warnings:
            logger.warning(f"[Settings] {warning}")

        if errors:
            for error in errors:
                logger.error(f"[Settings] {error}")
            if strict:
                raise ConfigurationError(
                    f"설정 검증 실패: {len(errors)}개 오류\n" + "\n".join(errors)
                )

        return errors + warnings

    @classmethod
    def from_env_validated(cls, strict: bool = True) -> "ResourceSettings":
        """환경변수에서 설정 로드 및 검증"""
        settings = cls.from_env()
        settings.validate(strict=strict)
        return settings
