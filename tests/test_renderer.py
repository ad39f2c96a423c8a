"""Tests for plume.templates.renderer."""

from __future__ import annotations

from plume.templates.blocks import Block
from plume.templates.masks import MaskRegistry
from plume.templates.renderer import (
    Renderer,
    format_value,
    literal_name,
    resolve_value,
    substitute_names,
)


class _Badge:
    def render(self) -> str:
        return "<span>badge</span>"


class TestFormatValue:
    def test_values(self):
        assert format_value(None) == ""
        assert format_value(False) == ""
        assert format_value(True) == "1"
        assert format_value(0) == "0"
        assert format_value(2.5) == "2.5"
        assert format_value("x") == "x"


class TestResolveValue:
    def test_callable_is_called(self):
        assert resolve_value(lambda: 5) == 5

    def test_renderable_is_rendered(self):
        assert resolve_value(_Badge()) == "<span>badge</span>"

    def test_callable_returning_renderable(self):
        assert resolve_value(_Badge) == "<span>badge</span>"

    def test_scalar_unchanged(self):
        assert resolve_value("x") == "x"


class TestSubstituteNames:
    def test_escaped_and_raw(self):
        code = "{{v}}|{{{v}}}"
        assert substitute_names(code, {"v": "<b>"}, MaskRegistry()) == "&lt;b&gt;|<b>"

    def test_dotted_names_are_literal(self):
        code = "{{user.name}} {{userxname}}"
        result = substitute_names(code, {"user.name": "Ann"}, MaskRegistry())
        assert result == "Ann {{userxname}}"

    def test_masks_on_escaped_see_escaped_text(self):
        masks = MaskRegistry()
        seen = []
        masks.register_mask("spy", lambda v: seen.append(v) or v)
        substitute_names("{{v|spy}}", {"v": "a&b"}, masks)
        assert seen == ["a&amp;b"]

    def test_masks_on_raw_see_raw_value(self):
        masks = MaskRegistry()
        masks.register_mask("double", lambda v: v * 2)
        masks.register_mask("addOne", lambda v: v + 1)
        assert substitute_names("{{{x|double|addOne}}}", {"x": 3}, masks) == "7"

    def test_unreferenced_callable_not_called(self):
        calls = []
        substitute_names("nothing here", {"f": lambda: calls.append(1)}, MaskRegistry())
        assert calls == []

    def test_other_names_untouched(self):
        assert substitute_names("{{a}}{{b}}", {"a": "1"}, MaskRegistry()) == "1{{b}}"

    def test_brace_next_to_placeholder(self):
        masks = MaskRegistry()
        assert substitute_names("{a: {{x}}};", {"x": 1}, masks) == "{a: 1};"
        assert substitute_names("a{{{x}}", {"x": "v"}, masks) == "a{v"

    def test_sentinels_in_values_become_references(self):
        code = "{{v}}|{{{v}}}"
        result = substitute_names(code, {"v": "\ue001x\ue000"}, MaskRegistry())
        assert result == "&#xE001;x&#xE000;|&#xE001;x&#xE000;"


class TestRenderer:
    def _renderer(self, root: Block, **kwargs) -> Renderer:
        return Renderer(root, MaskRegistry(), **kwargs)

    def test_block_without_variables_is_its_code(self):
        root = Block(children={"Main": Block(code="static")})
        assert self._renderer(root).render("Main") == "static"

    def test_children_are_inlined(self):
        main = Block(code="[{{{Inner}}}]", children={"Inner": Block(code="in")})
        root = Block(children={"Main": main})
        assert self._renderer(root).render("Main") == "[in]"

    def test_unreferenced_child_contributes_nothing(self):
        main = Block(code="only", children={"Unused": Block(code="x")})
        root = Block(children={"Main": main})
        assert self._renderer(root).render("Main") == "only"

    def test_row_metadata(self):
        row = Block(
            code="{{{templateRowNum}}}:{{{templateRowFirst|tf}}}{{{templateRowLast|tf}}}"
            "{{{templateRowOdd|tf}}}{{{templateRowEven|tf}}}:{{{n}}};",
            variables={0: {"n": "a"}, 1: {"n": "b"}, 2: {"n": "c"}},
        )
        root = Block(children={"Row": row})
        masks = MaskRegistry()
        masks.register_mask("tf", lambda v: "T" if v else "F")
        result = Renderer(root, masks).render("Row")
        assert result == "1:TFFT:a;2:FFTF:b;3:FTFT:c;"

    def test_global_substitution_from_root(self):
        main = Block(code="<title>{{SiteName}}</title>")
        root = Block(children={"Main": main}, variables={"SiteName": "Plume"})
        assert self._renderer(root).render("Main") == "<title>Plume</title>"

    def test_literal_folding(self):
        root = Block(children={"Main": Block(code="{{`a < b`}}")})
        renderer = self._renderer(root)
        assert renderer.render("Main") == "a &lt; b"
        assert literal_name("a < b") not in root.variables

    def test_literal_with_masks(self):
        root = Block(children={"Main": Block(code="{{`hello`|upper}}")})
        masks = MaskRegistry()
        masks.register_mask("upper", str.upper)
        assert Renderer(root, masks).render("Main") == "HELLO"

    def test_strip_unused(self):
        root = Block(children={"Main": Block(code="A{{missing}}{{{gone|mask}}}B")})
        assert self._renderer(root).render("Main") == "AB"
        kept = self._renderer(root, remove_unused_names=False).render("Main")
        assert kept == "A{{missing}}{{{gone|mask}}}B"

    def test_strip_comments(self):
        root = Block(children={"Main": Block(code="a<!-- drop\nme -->b<!--@ keep -->c")})
        assert self._renderer(root).render("Main") == "ab<!--@ keep -->c"
        kept = self._renderer(root, remove_html_comments=False).render("Main")
        assert kept == "a<!-- drop\nme -->b<!--@ keep -->c"

    def test_processors_run_last(self):
        root = Block(children={"Main": Block(code="Yes{{gone}}")})
        masks = MaskRegistry()
        seen = []
        masks.register_processor(lambda s: seen.append(s) or s.replace("Yes", "Oui"))
        assert Renderer(root, masks).render("Main") == "Oui"
        assert seen == ["Yes"]

    def test_strip_unused_keeps_neighbouring_braces(self):
        root = Block(children={"Main": Block(code="{a: {{gone}}};{{{gone}}}")})
        assert self._renderer(root).render("Main") == "{a: };"

    def test_literal_keeps_user_variable_with_same_name(self):
        name = literal_name("x")
        root = Block(children={"Main": Block(code="{{`x`}}")}, variables={name: "mine"})
        assert self._renderer(root).render("Main") == "mine"
        assert root.variables == {name: "mine"}
