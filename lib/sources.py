"""
소스 파일 읽기 헬퍼

모든 파일 읽기는 여기를 거쳐 OSError → ReadError, YAML 오류 → EvalError로 변환됩니다.
"""

import asyncio
from pathlib import Path
from typing import Any, Awaitable

import yaml

from .errors import EvalError, ReadError


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8") as f:
        return f.read()


async def read_text(path: str | Path) -> str:
    """UTF-8 텍스트 파일 읽기 (executor에서 실행)

    Raises:
        ReadError: 파일이 없거나 읽을 수 없을 때
    """
    path = Path(path)
    loop = asyncio.get_event_loop()
    try:
        return await loop.run_in_executor(None, _read_text, path)
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"파일 읽기 실패: {e}", path=str(path)) from e


def parse_yaml(text: str, source: str = "<string>") -> Any:
    """YAML 해석

    safe_load는 리터럴(매핑, 리스트, 스칼라)만 만들며 임의 객체 생성이나
    환경 접근을 하지 않습니다.

    Raises:
        EvalError: 문법 오류
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise EvalError(f"YAML 해석 실패: {e}", path=source) from e


async def read_yaml(path: str | Path) -> Any:
    """YAML 파일 읽기 + 해석"""
    return parse_yaml(await read_text(path), str(path))


def read_yaml_sync(path: str | Path) -> Any:
    """시작 시점 전용 동기 버전"""
    path = Path(path)
    try:
        text = _read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"파일 읽기 실패: {e}", path=str(path)) from e
    return parse_yaml(text, str(path))


async def gather_all(*jobs: Awaitable[Any]) -> list[Any]:
    """모든 작업이 끝날 때까지 기다린 뒤 첫 번째 에러(입력 순서 기준)를 전달

    asyncio.gather 기본 동작과 달리 실패 후에도 나머지 작업이 백그라운드에 남지 않습니다.
    """
    results = await asyncio.gather(*jobs, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results
