"""Tests for plume.templates.views."""

from __future__ import annotations

from plume.templates import Template, View, get_template, reset_template


class GreetingView(View):
    address = "Greeting"

    def load_view(self) -> None:
        self.template.load_from_string("Hello {{Name}}", self.address)
        self.calls: list[str] = []

    def will_render_output(self) -> None:
        self.calls.append("will_render")
        self.template.assign({"Name": "Ann"}, self.address)


class HiddenView(View):
    def should_render_output(self) -> bool:
        return False


class TestView:
    def test_render(self):
        view = GreetingView(Template())
        assert view.render() == "Hello Ann"
        assert view.calls == ["will_render"]

    def test_render_other_address(self):
        template = Template()
        template.load_from_string("other", "Other")
        view = GreetingView(template)
        assert view.render("Other") == "other"

    def test_should_render_output(self):
        template = Template()
        template.load_from_string("never", "Main")
        assert HiddenView(template).render() == ""

    def test_defaults_to_global_template(self):
        reset_template()
        view = View()
        assert view.template is get_template()
        assert view.address == "Main"


class TestViewAsValue:
    def test_view_is_rendered_in_place(self):
        widgets = Template()
        sidebar = GreetingView(widgets)

        page = Template()
        page.load_from_string("<aside>{{{Sidebar}}}</aside>", "Main")
        page.assign({"Sidebar": sidebar}, "Main")
        assert page.render("Main") == "<aside>Hello Ann</aside>"

    def test_escaped_view_output(self):
        widgets = Template()
        widgets.load_from_string("<b>bold</b>", "Main")
        page = Template()
        page.load_from_string("{{Widget}}", "Main")
        page.assign({"Widget": View(widgets)}, "Main")
        assert page.render("Main") == "&lt;b&gt;bold&lt;/b&gt;"
