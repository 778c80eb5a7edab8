#!/usr/bin/env python
"""
리소스 1회 빌드 스크립트

서버를 띄우지 않고 리로드 파이프라인을 한 번 실행하여
설정/해시/템플릿이 정상적으로 만들어지는지 확인합니다.

사용법:
    # 기본 실행 (현재 디렉토리 기준)
    python scripts/reload_resources.py

    # 리소스 루트 지정
    python scripts/reload_resources.py --root /srv/site

    # 디버그 모드
    python scripts/reload_resources.py --log-level DEBUG
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from lib.errors import ResourceError  # noqa: E402
from server.orchestrator import ReloadOrchestrator  # noqa: E402
from server.settings import ConfigurationError, ResourceSettings  # noqa: E402


def setup_logging(level: str = "INFO") -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def build_once(settings: ResourceSettings) -> int:
    """파이프라인 1회 실행 후 게시된 항목 출력

    Returns:
        종료 코드 (0=성공)
    """
    orchestrator = ReloadOrchestrator.from_settings(settings)
    try:
        snapshot = await orchestrator.reload()
    except ResourceError as e:
        print(f"[Error] 리소스 빌드 실패: {e}")
        return 1

    print(f"generation: {snapshot.generation}")
    print(f"config_hash: {snapshot.client_config_hash}")
    for name in ("vendor_hash", "css_hash", "client_hash"):
        print(f"{name}: {snapshot.hot.get(name)}")
    for key in sorted(snapshot.resources):
        value = snapshot.resources[key]
        if isinstance(value, tuple):
            print(f"  {key}: {len(value)}개 세그먼트")
        elif isinstance(value, str) and len(value) > 16:
            print(f"  {key}: {len(value)}자")
        else:
            print(f"  {key}: {value}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="핫 리소스 1회 빌드")
    parser.add_argument("--root", default=None, help="리소스 루트 디렉토리")
    parser.add_argument("--log-level", default="INFO", help="로그 레벨")
    args = parser.parse_args()

    setup_logging(args.log_level)

    settings = ResourceSettings.from_env()
    if args.root:
        settings.root_dir = args.root

    try:
        settings.validate(strict=True)
    except ConfigurationError as e:
        print(f"[Error] {e}")
        sys.exit(1)

    sys.exit(asyncio.run(build_once(settings)))


if __name__ == "__main__":
    main()
