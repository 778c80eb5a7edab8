"""
공용 타입 정의

리로드 결과물(Dataclass)과 설정 파일 스키마(Pydantic 모델).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


def empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


class OptionDescriptor(BaseModel):
    """옵션 패널 항목 (options.yaml 한 줄)

    type:
        None/"checkbox" → 체크박스, "number", "shortcut", "image",
        리스트 → 해당 값들로 구성된 <select>
    load:
        생략하면 항상 표시, 지정되면 (null 포함) truthy일 때만 표시
    lang:
        커스텀 현지화 키 (언어팩의 [label, title] 포맷 문자열)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    tab: int = Field(ge=0)
    type: str | list[str] | None = None
    load: Any = None
    lang: str | None = None

    @property
    def is_loaded(self) -> bool:
        return "load" not in self.model_fields_set or bool(self.load)


class LanguagePack(BaseModel):
    """언어팩 (config/lang/<lang>.yaml)"""

    model_config = ConfigDict(extra="ignore")

    show_seconds: bool = False
    tmpl: dict[str, Any] = Field(default_factory=dict)
    common: dict[str, Any] = Field(default_factory=dict)
    opts: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class AssetHash:
    """파일 그룹의 집계 해시"""

    name: str
    digest: str
    files: tuple[str, ...] = ()


@dataclass(frozen=True)
class TemplateArtifact:
    """언어별 컴파일된 index 템플릿

    segments는 마커 위치에서 분할된 문자열 목록이며,
    markers[i]는 segments[i]와 segments[i + 1] 사이에 요청 시점에 채워질 값입니다.
    """

    lang: str
    segments: tuple[str, ...]
    markers: tuple[str, ...]
    hash: str


@dataclass(frozen=True)
class ResourceSnapshot:
    """한 번의 리로드로 만들어진 읽기 전용 리소스 묶음"""

    generation: int = 0
    hot: Mapping[str, Any] = field(default_factory=empty_mapping)
    client_config: Mapping[str, Any] = field(default_factory=empty_mapping)
    client_hot_config: Mapping[str, Any] = field(default_factory=empty_mapping)
    client_config_hash: str = ""
    resources: Mapping[str, Any] = field(default_factory=empty_mapping)
    artifacts: Mapping[str, TemplateArtifact] = field(default_factory=empty_mapping)
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, key: str, default: Any = None) -> Any:
        return self.resources.get(key, default)


def freeze(data: dict[str, Any]) -> Mapping[str, Any]:
    """dict를 읽기 전용 뷰로 감싸기 (얕은 복사 후)"""
    return MappingProxyType(dict(data))
