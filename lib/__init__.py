"""
핫 리소스 파이프라인 공통 라이브러리

콘텐츠 해시, 프래그먼트 렌더러, 템플릿 컴파일러, 언어팩 로더, 에러 정의 제공.
"""

from .errors import (
    ConfigFormatError,
    EvalError,
    HashError,
    ReadError,
    ReloadStep,
    RenderError,
    ResourceError,
)
from .fragments import (
    render_faq,
    render_navigation,
    render_option,
    render_options,
    render_schedule,
)
from .hashing import ContentHasher, hash_string
from .pack_loader import LanguagePackLoader, load_options, parse_options
from .template_compiler import TemplateCompiler, interpolate, split_markers
from .types import (
    AssetHash,
    LanguagePack,
    OptionDescriptor,
    ResourceSnapshot,
    TemplateArtifact,
)

__all__ = [
    # Errors
    "ResourceError",
    "ReadError",
    "EvalError",
    "ConfigFormatError",
    "HashError",
    "RenderError",
    "ReloadStep",
    # Hashing
    "ContentHasher",
    "hash_string",
    # Fragments
    "render_navigation",
    "render_schedule",
    "render_faq",
    "render_options",
    "render_option",
    # Templates
    "TemplateCompiler",
    "interpolate",
    "split_markers",
    # Loaders
    "LanguagePackLoader",
    "load_options",
    "parse_options",
    # Types
    "AssetHash",
    "LanguagePack",
    "OptionDescriptor",
    "ResourceSnapshot",
    "TemplateArtifact",
]
