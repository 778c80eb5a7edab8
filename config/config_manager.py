"""
설정 병합 및 핫 설정 리로드

정적 서버 설정(시작 시 1회 로드)과 핫 설정(config/hot.yaml, 런타임 리로드)을 관리하고,
브라우저에 노출할 부분집합과 그 해시를 계산합니다.

설계 원칙:
- 핫 설정은 매 리로드마다 새 dict로 만들어짐 (삭제된 키가 남지 않음)
- 실행 중인 설정 객체는 절대 수정하지 않음, 게시는 오케스트레이터가 담당
- YAML safe_load만 사용 (임의 객체 생성, 환경변수 접근 없음)

사용법:
    ```python
    server_config = load_server_config("config/server.yaml")
    merger = ConfigMerger(server_config, "config/hot.yaml")
    candidate = await merger.reload_hot_config()
    candidate.client_config_hash
    ```
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from lib.errors import ConfigFormatError, ResourceError
from lib.hashing import hash_string
from lib.sources import parse_yaml, read_text, read_yaml_sync

logger = logging.getLogger(__name__)

# 브라우저에 전달되는 정적 설정 키
CLIENT_CONFIG_KEYS = (
    "USE_WEBSOCKETS",
    "SOCKET_PATH",
    "SOCKET_URL",
    "DEBUG",
    "READ_ONLY",
    "IP_TAGGING",
    "RADIO",
    "PYU",
    "BOARDS",
    "LANGS",
    "DEFAULT_LANG",
    "READ_ONLY_BOARDS",
    "WEBM",
    "UPLOAD_URL",
    "MEDIA_URL",
    "SECONDARY_MEDIA_URL",
    "THUMB_DIMENSIONS",
    "PINKY_DIMENSIONS",
    "SPOILER_IMAGES",
    "IMAGE_HATS",
    "ASSETS_DIR",
    "RECAPTCHA_PUBLIC_KEY",
    "LOGIN_KEYWORD",
    "STAFF_BOARD",
)

# 브라우저에 전달되는 핫 설정 키
CLIENT_HOT_KEYS = (
    "ILLYA_DANCE",
    "EIGHT_BALL",
    "THREADS_PER_PAGE",
    "ABBREVIATED_REPLIES",
    "SUBJECT_MAX_LENGTH",
    "EXCLUDE_REGEXP",
    "staff_aliases",
    "SAGE_ENABLED",
    "THREAD_LAST_N",
    "DEFAULT_CSS",
)

REQUIRED_SERVER_KEYS = ("LANGS", "BOARDS", "STAFF_BOARD", "PSEUDO_BOARDS")

# 핫 설정 소스에서 찾는 최상위 키
HOT_ROOT_KEY = "hot"


def pick(source: Mapping[str, Any], keys: Iterable[str]) -> dict[str, Any]:
    """화이트리스트 키만 추출 (없는 키는 생략)"""
    return {key: source[key] for key in keys if key in source}


def serialize(data: Mapping[str, Any], source: str | None = None) -> str:
    """정규화된 JSON 직렬화 (키 정렬, 공백 없음)

    Raises:
        ConfigFormatError: JSON으로 표현할 수 없는 값 포함
    """
    try:
        return json.dumps(
            data, sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )
    except (TypeError, ValueError) as e:
        raise ConfigFormatError(f"JSON 직렬화 불가: {e}", path=source) from e


def load_server_config(path: str | Path) -> dict[str, Any]:
    """정적 서버 설정 로드 (시작 시 1회)

    Raises:
        ReadError, EvalError: 파일 읽기/해석 실패
        ConfigFormatError: 필수 키 누락
    """
    config = read_yaml_sync(path)
    if not isinstance(config, Mapping):
        raise ConfigFormatError("서버 설정은 매핑이어야 함", path=str(path))

    missing = [key for key in REQUIRED_SERVER_KEYS if key not in config]
    if missing:
        raise ConfigFormatError(f"서버 설정 필수 키 누락: {missing}", path=str(path))
    if not isinstance(config["LANGS"], list) or not config["LANGS"]:
        raise ConfigFormatError("LANGS는 비어 있지 않은 리스트여야 함", path=str(path))

    logger.info(
        f"[ConfigMerger] 서버 설정 로드: {path}, "
        f"언어 {config['LANGS']}, 게시판 {len(config['BOARDS'])}개"
    )
    return dict(config)


@dataclass
class HotConfigCandidate:
    """리로드 중인 핫 설정 (게시 전)"""

    hot: dict[str, Any]
    client_hot_config: dict[str, Any] = field(default_factory=dict)
    client_config_hash: str = ""


class ConfigMerger:
    """정적 설정 + 핫 설정 병합기

    클라이언트용 정적 설정(client_config)은 생성 시 1회 계산되고,
    핫 설정과 클라이언트용 핫 설정은 reload_hot_config()마다 새로 만들어집니다.
    """

    def __init__(self, server_config: Mapping[str, Any], hot_config_path: str | Path):
        """
        Args:
            server_config: 정적 서버 설정
            hot_config_path: 핫 설정 소스 경로
        """
        self.server_config = MappingProxyType(dict(server_config))
        client_config = pick(server_config, CLIENT_CONFIG_KEYS)
        self.client_config_json = serialize(client_config)
        self.client_config = MappingProxyType(client_config)
        self.hot_config_path = Path(hot_config_path)
        self._callbacks: list[Callable] = []

    async def reload_hot_config(self) -> HotConfigCandidate:
        """핫 설정 소스를 읽어 새 후보 생성

        Returns:
            HotConfigCandidate (기존 게시 상태는 건드리지 않음)

        Raises:
            ReadError: 소스 읽기 실패
            EvalError: YAML 해석 실패
            ConfigFormatError: 최상위 hot 매핑 없음
            ResourceError: 리로드 콜백 실패
        """
        path = self.hot_config_path
        logger.info(f"[ConfigMerger] 핫 설정 리로드 시작: {path}")

        source = await read_text(path)
        evaluated = parse_yaml(source, str(path))
        if not isinstance(evaluated, Mapping) or not isinstance(
            evaluated.get(HOT_ROOT_KEY), Mapping
        ):
            raise ConfigFormatError(
                f"잘못된 핫 설정: 최상위 '{HOT_ROOT_KEY}' 매핑 없음", path=str(path)
            )

        hot = dict(evaluated[HOT_ROOT_KEY])
        client_hot = pick(hot, CLIENT_HOT_KEYS)
        hot["CLIENT_CONFIG"] = self.client_config_json
        hot["CLIENT_HOT"] = serialize(client_hot, str(path))
        hot["CLIENT_CONFIG_HASH"] = hash_string(hot["CLIENT_HOT"])

        await self._run_callbacks(hot)

        logger.info(
            f"[ConfigMerger] 핫 설정 리로드 완료: {len(hot)}개 키, "
            f"hash={hot['CLIENT_CONFIG_HASH']}"
        )
        return HotConfigCandidate(
            hot=hot,
            client_hot_config=client_hot,
            client_config_hash=hot["CLIENT_CONFIG_HASH"],
        )

    async def _run_callbacks(self, hot: dict[str, Any]) -> None:
        """리로드 콜백 호출 (실패 시 리로드 중단)"""
        for callback in self._callbacks:
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(hot)
                else:
                    callback(hot)
            except ResourceError:
                raise
            except Exception as e:
                logger.error(f"[ConfigMerger] 콜백 실행 실패: {e}")
                raise ResourceError(f"핫 설정 콜백 실패: {e}") from e

    def on_reload(self, callback: Callable) -> None:
        """리로드 콜백 등록 (게시 전 후보 핫 설정을 인자로 받음)"""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable) -> None:
        """리로드 콜백 제거"""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @property
    def langs(self) -> list[str]:
        return list(self.server_config["LANGS"])
