"""
리소스 저장소

요청 핸들러가 읽는 프로세스 전역 리소스. 게시는 스냅샷 참조 교체 한 번으로 이루어지므로
읽는 쪽은 항상 한 세대의 리소스만 보게 됩니다.
"""

import logging
from typing import Any, Mapping

from lib.types import ResourceSnapshot

logger = logging.getLogger(__name__)


class ResourceStore:
    """게시된 리소스 스냅샷 보관소

    소유자(오케스트레이터)만 publish()를 호출합니다.
    읽는 쪽은 snapshot을 한 번 가져와 그 참조로 작업해야 세대가 섞이지 않습니다.
    """

    def __init__(self) -> None:
        self._snapshot = ResourceSnapshot()

    @property
    def snapshot(self) -> ResourceSnapshot:
        """현재 게시된 스냅샷"""
        return self._snapshot

    @property
    def generation(self) -> int:
        return self._snapshot.generation

    @property
    def hot(self) -> Mapping[str, Any]:
        return self._snapshot.hot

    @property
    def client_config(self) -> Mapping[str, Any]:
        return self._snapshot.client_config

    @property
    def client_hot_config(self) -> Mapping[str, Any]:
        return self._snapshot.client_hot_config

    @property
    def client_config_hash(self) -> str:
        return self._snapshot.client_config_hash

    def get(self, key: str, default: Any = None) -> Any:
        """리소스 조회 (예: indexTmpl-en_GB)"""
        return self._snapshot.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._snapshot.resources[key]

    def __contains__(self, key: str) -> bool:
        return key in self._snapshot.resources

    def publish(self, snapshot: ResourceSnapshot) -> None:
        """새 스냅샷 게시 (참조 교체)"""
        if snapshot.generation <= self._snapshot.generation:
            raise ValueError(
                f"이전 세대 스냅샷 게시 시도: {snapshot.generation} "
                f"(현재 {self._snapshot.generation})"
            )
        self._snapshot = snapshot
        logger.info(
            f"[Store] 리소스 게시: generation={snapshot.generation}, "
            f"{len(snapshot.resources)}개 항목"
        )
