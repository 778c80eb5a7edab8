"""
HTML 프래그먼트 렌더러

템플릿에 삽입되는 UI 조각(네비게이션, FAQ, 스케줄, 옵션 패널)을 만드는 순수 함수 모음.
입력은 설정 로딩 단계에서 이미 검증되었다고 가정하며,
형식이 맞지 않으면 부분 마크업 대신 RenderError를 발생시킵니다.

설정 값은 운영자가 작성한 신뢰된 마크업이므로 이스케이프하지 않습니다.
"""

import random
from typing import Any, Mapping, Sequence

from .errors import RenderError
from .types import OptionDescriptor

SCHEDULE_FILLER = ("drink & fap", "fap & drink", "tea & keiki")
DEFAULT_SCHEDULE_TIME = "all day"
NAV_SEPARATOR = " / "

# 첫 번째 탭 하단에 붙는 링크 (내보내기, 가져오기, 숨긴 글 초기화)
EXTRA_LINKS = ("export", "import", "hidden")
INPUT_TYPES = (None, "checkbox", "number", "shortcut", "image")


def render_navigation(
    boards: Sequence[str],
    pseudo_boards: Sequence[Sequence[str]],
    staff_board: str | None = None,
) -> str:
    """상단 게시판 네비게이션

    Args:
        boards: 게시판 목록 (staff_board는 제외됨)
        pseudo_boards: (라벨, URL) 목록, 실제 게시판 뒤에 붙음

    Returns:
        <b id="navTop">[a / b / 라벨]</b>
    """
    entries = [
        f'<a href="../{board}/" class="history">{board}</a>'
        for board in boards
        if board != staff_board
    ]
    for item in pseudo_boards:
        if isinstance(item, str) or len(item) != 2:
            raise RenderError(f"잘못된 pseudo board 항목: {item!r}")
        label, url = item
        entries.append(f'<a href="{url}">{label}</a>')

    return f'<b id="navTop">[{NAV_SEPARATOR.join(entries)}]</b>'


def render_schedule(
    schedule: Sequence[Any],
    show_seconds: bool = False,
    rng: random.Random | None = None,
) -> str:
    """방송 스케줄 표

    Args:
        schedule: [요일, 계획, 시간, 요일, 계획, 시간, ...] 평면 리스트.
            계획이 비어 있으면 SCHEDULE_FILLER 중 하나, 시간이 비어 있으면 "all day".
        show_seconds: UTC 시계에 초 표시 여부
        rng: 테스트용 난수 생성기
    """
    if not isinstance(schedule, (list, tuple)):
        raise RenderError(f"스케줄은 리스트여야 함: {type(schedule).__name__}")
    rng = rng or random

    table = (
        '<table><span id="UTCClock">'
        f'<b title="{str(bool(show_seconds)).lower()}"></b><hr></span>'
    )
    for i in range(0, len(schedule), 3):
        day = schedule[i]
        plans = schedule[i + 1] if i + 1 < len(schedule) else None
        time = schedule[i + 2] if i + 2 < len(schedule) else None
        if not plans:
            plans = rng.choice(SCHEDULE_FILLER)
        if not time:
            time = DEFAULT_SCHEDULE_TIME
        table += (
            f"<tr><td><b>{day}&nbsp;&nbsp;</b></td>"
            f"<td>{plans}&nbsp;&nbsp;</td>"
            f"<td>{time}</td></tr>"
        )
    table += "</table>"
    return table


def render_faq(faq: Sequence[str] | None) -> str | None:
    """FAQ 목록

    Returns:
        <ul> 마크업, 항목이 없으면 None (섹션 생략)
    """
    if not faq:
        return None
    if not isinstance(faq, (list, tuple)):
        raise RenderError(f"FAQ는 리스트여야 함: {type(faq).__name__}")
    items = "".join(f"<li>{entry}</li>" for entry in faq)
    return f"<ul>{items}</ul>"


def render_options(
    options: Sequence[OptionDescriptor | None], lang: Mapping[str, Any]
) -> str:
    """옵션 패널 (탭 버튼 + 탭별 내용)

    Args:
        options: 전체 옵션 목록
        lang: 언어팩의 opts 섹션 (tabs, 옵션별 [label, title], export/import/hidden)
    """
    tabs = lang.get("tabs") if isinstance(lang, Mapping) else None
    if not isinstance(tabs, (list, tuple)):
        raise RenderError("언어팩에 옵션 탭 목록(tabs)이 없음")

    html = '<div class="bmodal" id="options-panel"><ul class="option_tab_sel">'
    for i, tab in enumerate(tabs):
        # 첫 번째 탭 버튼을 기본 선택
        selected = ' class="tab_sel"' if i == 0 else ""
        html += f'<li><a data-content="tab-{i}"{selected}>{tab}</a></li>'
    html += '</ul><ul class="option_tab_cont">'

    for i in range(len(tabs)):
        selected = " tab_sel" if i == 0 else ""
        html += f'<li class="tab-{i}{selected}">'
        for opt in options:
            if opt is None or opt.tab != i or not opt.is_loaded:
                continue
            html += render_option(opt, lang)
        if i == 0:
            html += _render_extras(lang)
        html += "</li>"

    html += "</ul></div>"
    return html


def render_option(opt: OptionDescriptor, lang: Mapping[str, Any]) -> str:
    """옵션 하나를 <input> 또는 <select>로 렌더링"""
    opt_type = opt.type
    is_list = isinstance(opt_type, list)
    if not is_list and opt_type not in INPUT_TYPES:
        raise RenderError(f"알 수 없는 옵션 타입: {opt.id}={opt_type!r}")

    label, title = _option_strings(opt, lang)

    html = "Alt+" if opt_type == "shortcut" else ""
    if is_list:
        html += "<select"
    else:
        html += "<input"
        if opt_type in (None, "checkbox"):
            html += ' type="checkbox"'
        elif opt_type == "image":
            html += ' type="file"'
        if opt_type == "number":
            html += ' style="width: 4em;" maxlength="4"'
        elif opt_type == "shortcut":
            html += ' maxlength="1"'
    html += f' id="{opt.id}" title="{title}">'

    if is_list:
        for item in opt_type:
            html += f'<option value="{item}">{lang.get(item) or item}</option>'
        html += "</select>"

    html += f'<label for="{opt.id}" title="{title}">{label}</label><br>'
    return html


def _option_strings(opt: OptionDescriptor, lang: Mapping[str, Any]) -> tuple[str, str]:
    """옵션의 (label, title)

    opt.lang이 있으면 해당 항목의 포맷 문자열에 옵션 id를 넣어 사용합니다.
    """
    try:
        if opt.lang:
            label_fmt, title_fmt = lang[opt.lang][:2]
            values = {"id": opt.id}
            return label_fmt.format_map(values), title_fmt.format_map(values)
        label, title = lang[opt.id][:2]
        return label, title
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        raise RenderError(f"옵션 현지화 문자열 오류: {opt.id} - {e!r}") from e


def _render_extras(lang: Mapping[str, Any]) -> str:
    html = "<br>"
    for link in EXTRA_LINKS:
        try:
            label, title = lang[link][:2]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise RenderError(f"옵션 현지화 문자열 오류: {link} - {e!r}") from e
        html += f'<a id="{link}" title="{title}">{label}</a> '

    # 설정 JSON 업로드용 숨김 input
    html += (
        '<input type="file" style="display: none;" '
        'id="importSettings" name="Import Settings"></input>'
    )
    return html
