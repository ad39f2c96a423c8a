# plume — logic-free block templating for server-side pages
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""View base class: a presentation object that renders one address.

Views are renderable values: bind a view into another template and the
renderer calls its :meth:`View.render` in place of the placeholder.

Usage::

    class SidebarView(View):
        address = "Sidebar"

        def load_view(self) -> None:
            self.template.load_template("sidebar.html", self.address)

        def will_render_output(self) -> None:
            self.template.assign({"Count": len(self.items)}, self.address)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plume.templates.engine import Template


class View:
    """Base class for views.

    Args:
        template: Engine to render with.  Defaults to the process-wide
            instance from :func:`~plume.templates.engine.get_template`.
    """

    address = "Main"

    def __init__(self, template: Template | None = None) -> None:
        if template is None:
            from plume.templates.engine import get_template

            template = get_template()
        self.template = template
        self.load_view()

    def load_view(self) -> None:
        """Set up this view.  Override to load markup and bind data."""

    def should_render_output(self) -> bool:
        """If this returns False, :meth:`render` returns an empty string."""
        return True

    def will_render_output(self) -> None:
        """Hook called just before the content is rendered."""

    def render(self, address: str | None = None) -> str:
        if not self.should_render_output():
            return ""
        self.will_render_output()
        return self.template.render(self.address if address is None else address)
