"""
콘텐츠 해시 계산

캐시 버스팅 URL과 변경 감지를 위한 MD5 해시를 계산합니다.
암호학적 강도는 필요 없고, 파일이 바뀌면 해시도 바뀌기만 하면 됩니다.

사용법:
    ```python
    hasher = ContentHasher()
    vendor = await hasher.hash_file("www/js/vendor.js")
    css = await hasher.hash_files("css_hash", await hasher.list_files("www/css", ".css"))
    ```
"""

import asyncio
import hashlib
import logging
import os
from pathlib import Path
from typing import Iterable

from .errors import HashError, ReadError
from .sources import gather_all
from .types import AssetHash

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def hash_string(value: str) -> str:
    """문자열 MD5 (hex)"""
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def _md5_file(path: Path) -> str:
    digest = hashlib.md5()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _list_dir(directory: Path, suffix: str) -> list[Path]:
    names = sorted(
        name for name in os.listdir(directory) if name.endswith(suffix)
    )
    return [directory / name for name in names]


class ContentHasher:
    """파일/파일 그룹 해시 계산기

    블로킹 파일 I/O는 executor에서 실행하여 이벤트 루프를 막지 않습니다.
    """

    async def hash_file(self, path: str | Path) -> str:
        """파일 하나의 MD5 해시

        Raises:
            HashError: 파일을 열거나 읽을 수 없을 때
        """
        path = Path(path)
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, _md5_file, path)
        except OSError as e:
            raise HashError(f"파일 해시 실패: {e.strerror or e}", path=str(path)) from e

    async def hash_files(
        self, group_name: str, paths: Iterable[str | Path]
    ) -> AssetHash:
        """파일 목록을 하나의 집계 해시로

        각 파일을 개별 해시한 뒤, 다이제스트를 입력 순서대로 이어 붙여 다시 해시합니다.
        파일 순서가 바뀌면 결과도 바뀝니다.

        Args:
            group_name: 해시 이름 (예: css_hash)
            paths: 파일 경로 목록 (순서 유지)

        Returns:
            AssetHash
        """
        paths = [Path(p) for p in paths]
        digests = await gather_all(*(self.hash_file(p) for p in paths))

        digest = hash_string("".join(digests))
        logger.debug(f"[Hasher] {group_name}: {len(paths)}개 파일 → {digest}")
        return AssetHash(
            name=group_name,
            digest=digest,
            files=tuple(str(p) for p in paths),
        )

    async def list_files(self, directory: str | Path, suffix: str) -> list[Path]:
        """디렉토리에서 확장자로 필터링한 파일 목록 (이름순 정렬)

        Raises:
            ReadError: 디렉토리를 읽을 수 없을 때
        """
        directory = Path(directory)
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, _list_dir, directory, suffix)
        except OSError as e:
            raise ReadError(
                f"디렉토리 읽기 실패: {e.strerror or e}", path=str(directory)
            ) from e
