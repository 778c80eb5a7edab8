"""
HTML 프래그먼트 렌더러 테스트
"""

import random

import pytest

from lib.errors import RenderError
from lib.fragments import (
    DEFAULT_SCHEDULE_TIME,
    SCHEDULE_FILLER,
    render_faq,
    render_navigation,
    render_option,
    render_options,
    render_schedule,
)
from lib.types import OptionDescriptor


class TestNavigation:
    """네비게이션 렌더러 테스트"""

    def test_excludes_staff_board(self):
        """staff 게시판 제외, ' / '로 구분"""
        html = render_navigation(["a", "b", "staff"], [], "staff")

        assert html == (
            '<b id="navTop">['
            '<a href="../a/" class="history">a</a> / '
            '<a href="../b/" class="history">b</a>'
            "]</b>"
        )
        assert "../staff/" not in html

    def test_staff_first_has_no_leading_separator(self):
        html = render_navigation(["staff", "a"], [], "staff")

        assert html.startswith('<b id="navTop">[<a href="../a/"')

    def test_pseudo_boards_after_real_boards(self):
        """pseudo board는 항상 실제 게시판 뒤"""
        html = render_navigation(
            ["a"], [["g", "https://example.com/g/"], ["r", "/r/"]], "staff"
        )

        assert html.endswith(
            ' / <a href="https://example.com/g/">g</a> / <a href="/r/">r</a>]</b>'
        )
        assert html.index("../a/") < html.index("example.com")

    def test_malformed_pseudo_board(self):
        with pytest.raises(RenderError):
            render_navigation(["a"], [["only-label"]], "staff")


class TestSchedule:
    """스케줄 렌더러 테스트"""

    def test_renders_rows(self):
        html = render_schedule(["Friday", "Anime night", "20:00 UTC"])

        assert html.startswith('<table><span id="UTCClock"><b title="false">')
        assert (
            "<tr><td><b>Friday&nbsp;&nbsp;</b></td>"
            "<td>Anime night&nbsp;&nbsp;</td><td>20:00 UTC</td></tr>"
        ) in html
        assert html.endswith("</table>")

    def test_show_seconds(self):
        assert '<b title="true">' in render_schedule([], show_seconds=True)

    @pytest.mark.parametrize("seed", range(10))
    def test_empty_plan_uses_filler(self, seed):
        """빈 계획은 항상 필러 문구 중 하나"""
        html = render_schedule(["Monday", "", ""], rng=random.Random(seed))

        row = html[html.index("<tr>") :]
        plan = row.split("<td>")[2].split("&nbsp;")[0]
        assert plan in SCHEDULE_FILLER

    def test_empty_time_defaults_all_day(self):
        html = render_schedule(["Monday", "Stream", None])

        assert f"<td>{DEFAULT_SCHEDULE_TIME}</td>" in html

    def test_trailing_partial_triple(self):
        """마지막 항목의 계획/시간이 없어도 기본값으로 채움"""
        html = render_schedule(["Sunday"], rng=random.Random(0))

        assert "<b>Sunday&nbsp;&nbsp;</b>" in html
        assert f"<td>{DEFAULT_SCHEDULE_TIME}</td>" in html

    def test_not_a_list(self):
        with pytest.raises(RenderError):
            render_schedule("Monday")


class TestFAQ:
    """FAQ 렌더러 테스트"""

    def test_renders_list(self):
        assert render_faq(["one", "two"]) == "<ul><li>one</li><li>two</li></ul>"

    def test_empty_is_none(self):
        """빈 목록은 None (섹션 생략)"""
        assert render_faq([]) is None
        assert render_faq(None) is None

    def test_not_a_list(self):
        with pytest.raises(RenderError):
            render_faq("one")


class TestOptionsPanel:
    """옵션 패널 렌더러 테스트"""

    def test_tabs_and_first_selected(self, option_descriptors, lang_opts):
        """탭 버튼과 탭 내용 모두 첫 번째가 선택됨"""
        html = render_options(option_descriptors, lang_opts)

        assert html.startswith('<div class="bmodal" id="options-panel">')
        assert '<li><a data-content="tab-0" class="tab_sel">General</a></li>' in html
        assert '<li><a data-content="tab-1">Search</a></li>' in html
        assert '<li class="tab-0 tab_sel">' in html
        assert '<li class="tab-1">' in html
        assert html.count("tab_sel") == 3  # 탭 버튼 목록 클래스 1 + 버튼 1 + 내용 1

    def test_falsy_load_omitted(self, option_descriptors, lang_opts):
        """load가 falsy인 옵션은 렌더링하지 않음"""
        html = render_options(option_descriptors, lang_opts)

        assert 'id="hatToggle"' not in html
        assert "Hats" not in html

    def test_truthy_load_rendered(self, lang_opts):
        options = [OptionDescriptor(id="hatToggle", tab=0, load=True)]

        html = render_options(options, lang_opts)

        assert 'id="hatToggle"' in html

    def test_null_load_omitted(self, lang_opts):
        """load가 명시적으로 null이면 생략, 지정하지 않으면 표시"""
        options = [
            OptionDescriptor(id="hatToggle", tab=0, load=None),
            OptionDescriptor(id="lastn", tab=0),
        ]

        html = render_options(options, lang_opts)

        assert 'id="hatToggle"' not in html
        assert 'id="lastn"' in html

    def test_options_in_their_tab(self, option_descriptors, lang_opts):
        html = render_options(option_descriptors, lang_opts)

        tab1 = html.index('<li class="tab-1">')
        tab2 = html.index('<li class="tab-2">')
        assert tab1 < html.index('id="userBGimage"') < tab2
        assert html.index('id="new"') > tab2

    def test_extras_only_in_first_tab(self, option_descriptors, lang_opts):
        """내보내기/가져오기/숨김 링크는 첫 탭에만"""
        html = render_options(option_descriptors, lang_opts)

        tab1 = html.index('<li class="tab-1">')
        for link in ("export", "import", "hidden"):
            assert html.count(f'<a id="{link}"') == 1
            assert html.index(f'<a id="{link}"') < tab1
        assert html.count('id="importSettings"') == 1

    def test_none_entries_skipped(self, lang_opts):
        html = render_options([None, OptionDescriptor(id="lastn", tab=0, type="number")], lang_opts)

        assert 'id="lastn"' in html

    def test_missing_tabs(self):
        with pytest.raises(RenderError):
            render_options([], {"export": ["a", "b"]})

    def test_missing_localisation(self, lang_opts):
        """언어팩에 없는 옵션 → RenderError"""
        options = [OptionDescriptor(id="unknownOpt", tab=0)]

        with pytest.raises(RenderError):
            render_options(options, lang_opts)


class TestRenderOption:
    """옵션 하나 렌더링 테스트"""

    def test_checkbox_default(self, lang_opts):
        html = render_option(OptionDescriptor(id="checkboxOpt", tab=0), lang_opts)

        assert html == (
            '<input type="checkbox" id="checkboxOpt" title="Checkbox title">'
            '<label for="checkboxOpt" title="Checkbox title">Checkbox</label><br>'
        )

    def test_number(self, lang_opts):
        html = render_option(
            OptionDescriptor(id="numberOpt", tab=0, type="number"), lang_opts
        )

        assert html.startswith('<input style="width: 4em;" maxlength="4" id="numberOpt"')

    def test_shortcut(self, lang_opts):
        html = render_option(OptionDescriptor(id="new", tab=0, type="shortcut"), lang_opts)

        assert html.startswith('Alt+<input maxlength="1" id="new"')

    def test_image(self, lang_opts):
        html = render_option(
            OptionDescriptor(id="userBGimage", tab=0, type="image"), lang_opts
        )

        assert html.startswith('<input type="file" id="userBGimage"')

    def test_list_renders_select(self, lang_opts):
        """리스트 타입 → <select>, 언어팩에 있으면 현지화된 라벨"""
        html = render_option(
            OptionDescriptor(id="lang", tab=0, type=["en_GB", "ru"]), lang_opts
        )

        assert html.startswith('<select id="lang" title="Change language">')
        assert '<option value="en_GB">English</option>' in html
        assert '<option value="ru">ru</option>' in html
        assert "</select><label" in html

    def test_custom_localisation(self, lang_opts):
        """lang 키가 있으면 포맷 문자열에 id 적용"""
        html = render_option(
            OptionDescriptor(id="imgsearch_google", tab=0, lang="imgSearch"), lang_opts
        )

        assert 'title="Toggle imgsearch_google links"' in html
        assert ">imgsearch_google</label>" in html

    def test_unknown_type(self, lang_opts):
        with pytest.raises(RenderError):
            render_option(OptionDescriptor(id="lastn", tab=0, type="slider"), lang_opts)
