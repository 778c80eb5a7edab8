"""
index 템플릿 컴파일러

정적 변수({{ name }})는 여기서 모두 치환하고,
요청마다 달라지는 값($MARKER)은 위치만 남겨 요청 시점 렌더러가 순서대로 채우도록 합니다.

2단계 템플릿:
    1단계 (이 모듈): 설정 + 핫 설정 + 언어팩 + 프래그먼트 → 확장된 마크업
    2단계 (외부): segments[0] + value(markers[0]) + segments[1] + ...
"""

import logging
import re
from typing import Any, Mapping, Sequence

from .errors import RenderError
from .fragments import render_faq, render_navigation, render_options, render_schedule
from .hashing import hash_string
from .types import LanguagePack, OptionDescriptor, TemplateArtifact

logger = logging.getLogger(__name__)

INTERPOLATE_PATTERN = re.compile(r"\{\{(.+?)}}")
MARKER_PATTERN = re.compile(r"\$[A-Z]+")
TEMPLATE_HASH_LENGTH = 8


def to_markup(value: Any) -> str:
    """템플릿 값 → 문자열 (None은 빈 문자열, bool은 JS 표기)"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(to_markup(item) for item in value)
    return str(value)


def lookup(variables: Mapping[str, Any], name: str) -> Any:
    """점 표기 변수 조회 (예: common.title)"""
    value: Any = variables
    for part in name.split("."):
        if not isinstance(value, Mapping) or part not in value:
            raise RenderError(f"템플릿 변수 없음: {name}")
        value = value[part]
    return value


def interpolate(template: str, variables: Mapping[str, Any]) -> str:
    """{{ name }} 치환

    Raises:
        RenderError: 정의되지 않은 변수 참조
    """

    def replace(match: re.Match) -> str:
        return to_markup(lookup(variables, match.group(1).strip()))

    return INTERPOLATE_PATTERN.sub(replace, template)


def find_markers(template: str) -> list[str]:
    """템플릿의 고유 마커 목록 (처음 등장 순서)"""
    return list(dict.fromkeys(MARKER_PATTERN.findall(template)))


def split_markers(
    expanded: str, expected: Sequence[str]
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """확장된 마크업을 마커 위치에서 분할

    Args:
        expanded: 정적 변수가 치환된 마크업
        expected: 원본 템플릿의 고유 마커 (등장 순서)

    Returns:
        (segments, markers), len(segments) == len(expected) + 1

    Raises:
        RenderError: 마커가 중복되었거나 치환 값이 마커를 만들어낸 경우
    """
    markers = tuple(MARKER_PATTERN.findall(expanded))
    if markers != tuple(expected):
        raise RenderError(
            f"템플릿 마커 불일치: 원본 {list(expected)}, 확장 결과 {list(markers)}"
        )
    return tuple(MARKER_PATTERN.split(expanded)), markers


class TemplateCompiler:
    """index/에러 페이지 템플릿 컴파일러

    사용법:
        ```python
        compiler = TemplateCompiler(options)
        base_vars = compiler.build_base_vars(hot, server_config)
        artifacts = compiler.compile_index_templates(raw, base_vars, packs)
        ```
    """

    def __init__(self, options: Sequence[OptionDescriptor | None] = ()):
        """
        Args:
            options: 옵션 패널에 표시할 옵션 목록
        """
        self.options = list(options)

    def build_base_vars(
        self, hot: Mapping[str, Any], config: Mapping[str, Any]
    ) -> dict[str, Any]:
        """모든 언어에 공통인 템플릿 변수

        핫 설정 위에 정적 설정을 덮어쓰고, 네비게이션/FAQ/배너를 생성합니다.
        """
        variables = dict(hot)
        variables.update(config)
        variables["NAVTOP"] = render_navigation(
            config.get("BOARDS", []),
            config.get("PSEUDO_BOARDS", []),
            config.get("STAFF_BOARD"),
        )
        variables["FAQ"] = render_faq(variables.get("FAQ"))
        if variables.get("BANNERINFO"):
            variables["BANNERINFO"] = f"&nbsp;&nbsp;[{variables['BANNERINFO']}]"
        return variables

    def compile_index(
        self,
        template: str,
        base_vars: Mapping[str, Any],
        lang: str,
        pack: LanguagePack,
    ) -> TemplateArtifact:
        """한 언어의 index 템플릿 컴파일"""
        variables = dict(base_vars)
        variables["lang"] = lang
        # 현지화 문자열 주입
        variables.update(pack.tmpl)
        variables.update(pack.common)
        variables["schedule_modal"] = render_schedule(
            variables.get("SCHEDULE") or [], pack.show_seconds
        )
        variables["options_panel"] = render_options(self.options, pack.opts)

        expanded = interpolate(template, variables)
        segments, markers = split_markers(expanded, find_markers(template))
        return TemplateArtifact(
            lang=lang,
            segments=segments,
            markers=markers,
            hash=hash_string(expanded)[:TEMPLATE_HASH_LENGTH],
        )

    def compile_index_templates(
        self,
        template: str,
        base_vars: Mapping[str, Any],
        packs: Mapping[str, LanguagePack],
    ) -> dict[str, TemplateArtifact]:
        """언어별 index 템플릿 컴파일

        각 언어는 base_vars 복사본과 자신의 언어팩만 사용하므로 서로 영향을 주지 않습니다.
        """
        artifacts = {}
        for lang, pack in packs.items():
            artifacts[lang] = self.compile_index(template, base_vars, lang, pack)
            logger.debug(
                f"[Compiler] index 컴파일: {lang}, "
                f"{len(artifacts[lang].segments)}개 세그먼트, {artifacts[lang].hash}"
            )
        return artifacts

    def expand_templates(
        self,
        templates: Mapping[str, str],
        hot: Mapping[str, Any],
        config: Mapping[str, Any],
        packs: Mapping[str, LanguagePack],
    ) -> tuple[dict[str, Any], dict[str, TemplateArtifact]]:
        """리소스 저장소에 게시할 템플릿 항목 생성

        Args:
            templates: {"index", "notFound", "serverError"} 원본 텍스트
            hot: 후보 핫 설정 (해시 포함)
            config: 정적 서버 설정
            packs: {lang: LanguagePack}

        Returns:
            (리소스 항목, 언어별 아티팩트)
        """
        base_vars = self.build_base_vars(hot, config)
        artifacts = self.compile_index_templates(templates["index"], base_vars, packs)

        resources: dict[str, Any] = {
            "notFoundHtml": templates["notFound"],
            "serverErrorHtml": templates["serverError"],
        }
        for lang, artifact in artifacts.items():
            resources[f"indexTmpl-{lang}"] = artifact.segments
            resources[f"indexHash-{lang}"] = artifact.hash
        return resources, artifacts
