"""
Pytest 설정 및 공통 Fixture
"""

import copy
import tempfile
from pathlib import Path
from typing import Any

import pytest

from lib.types import OptionDescriptor
from server.orchestrator import ReloadOrchestrator
from server.settings import ResourceSettings


@pytest.fixture
def resource_root():
    """샘플 리소스가 채워진 임시 루트 디렉토리"""
    from tests.sample_data import write_resource_tree

    with tempfile.TemporaryDirectory() as tmpdir:
        yield write_resource_tree(Path(tmpdir))


@pytest.fixture
def settings(resource_root: Path) -> ResourceSettings:
    """임시 루트 기준 ResourceSettings"""
    return ResourceSettings(root_dir=str(resource_root))


@pytest.fixture
def orchestrator(settings: ResourceSettings) -> ReloadOrchestrator:
    """임시 루트 기준 ReloadOrchestrator"""
    return ReloadOrchestrator.from_settings(settings)


@pytest.fixture
def server_config() -> dict[str, Any]:
    """샘플 정적 설정 (복사본)"""
    from tests.sample_data import SERVER_CONFIG

    return copy.deepcopy(SERVER_CONFIG)


@pytest.fixture
def lang_opts() -> dict[str, Any]:
    """옵션 패널용 언어팩 opts"""
    from tests.sample_data import make_lang_opts

    return make_lang_opts()


@pytest.fixture
def option_descriptors() -> list[OptionDescriptor]:
    """샘플 옵션 목록 (load 해석 전 원본에서 IMAGE_HATS=False 반영)"""
    from tests.sample_data import OPTIONS

    options = []
    for entry in OPTIONS:
        data = dict(entry)
        if data.get("load") == "IMAGE_HATS":
            data["load"] = False
        options.append(OptionDescriptor.model_validate(data))
    return options
