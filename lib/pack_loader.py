"""
언어팩 및 옵션 목록 로더

언어별 현지화 문자열(config/lang/<lang>.yaml)과
옵션 패널 항목(config/options.yaml)을 로드합니다.

리로드마다 파일을 새로 읽으므로 캐시하지 않습니다.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from .errors import ConfigFormatError
from .sources import gather_all, read_yaml
from .types import LanguagePack, OptionDescriptor

logger = logging.getLogger(__name__)


class LanguagePackLoader:
    """언어팩 로더

    사용 예시:
        loader = LanguagePackLoader("config/lang")
        packs = await loader.load_all(["en_GB", "ru"])
        packs["ru"].opts["tabs"]
    """

    DEFAULT_LANG_DIR = "config/lang"

    def __init__(self, lang_dir: str | Path | None = None):
        """
        Args:
            lang_dir: 언어팩 디렉토리 (기본값: 프로젝트 루트 기준 config/lang)
        """
        if lang_dir:
            self.lang_dir = Path(lang_dir)
        else:
            project_root = Path(__file__).parent.parent
            self.lang_dir = project_root / self.DEFAULT_LANG_DIR

    def path_for(self, lang: str) -> Path:
        return self.lang_dir / f"{lang}.yaml"

    async def load(self, lang: str) -> LanguagePack:
        """언어팩 하나 로드

        Raises:
            ReadError: 파일 없음
            EvalError: YAML 오류
            ConfigFormatError: 언어팩 구조 오류
        """
        path = self.path_for(lang)
        data = await read_yaml(path)
        if not isinstance(data, Mapping):
            raise ConfigFormatError("언어팩은 매핑이어야 함", path=str(path))
        try:
            pack = LanguagePack.model_validate(data)
        except ValidationError as e:
            raise ConfigFormatError(f"언어팩 형식 오류: {e}", path=str(path)) from e
        logger.debug(f"[PackLoader] 언어팩 로드: {lang}")
        return pack

    async def load_all(self, langs: Iterable[str]) -> dict[str, LanguagePack]:
        """여러 언어팩 동시 로드 (입력 순서 유지)"""
        langs = list(langs)
        packs = await gather_all(*(self.load(lang) for lang in langs))
        return dict(zip(langs, packs))

    def list_available(self) -> list[str]:
        """디렉토리에 있는 언어팩 이름 목록"""
        if not self.lang_dir.exists():
            return []
        return sorted(p.stem for p in self.lang_dir.glob("*.yaml"))


def resolve_load(value: Any, config: Mapping[str, Any]) -> Any:
    """옵션의 load 값 해석

    bool은 그대로, null은 False, 문자열은 정적 설정 키 이름으로 보고 그 값의 truthiness를 사용합니다.
    설정에 없는 키는 False입니다.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return bool(config.get(value))
    return value


def parse_options(
    raw: Any, config: Mapping[str, Any], source: str = "<options>"
) -> list[OptionDescriptor]:
    """options.yaml 내용을 OptionDescriptor 목록으로 변환

    Raises:
        ConfigFormatError: 목록이 아니거나 항목 형식 오류
    """
    if raw is None:
        return []
    if isinstance(raw, Mapping):
        raw = raw.get("options", [])
    if not isinstance(raw, list):
        raise ConfigFormatError("옵션 목록은 리스트여야 함", path=source)

    options = []
    for entry in raw:
        if entry is None:
            continue
        if not isinstance(entry, Mapping):
            raise ConfigFormatError(f"잘못된 옵션 항목: {entry!r}", path=source)
        data = dict(entry)
        if "load" in data:
            data["load"] = resolve_load(data["load"], config)
        try:
            options.append(OptionDescriptor.model_validate(data))
        except ValidationError as e:
            raise ConfigFormatError(f"옵션 형식 오류: {e}", path=source) from e
    return options


async def load_options(
    path: str | Path, config: Mapping[str, Any]
) -> list[OptionDescriptor]:
    """옵션 파일 로드"""
    return parse_options(await read_yaml(path), config, str(path))
