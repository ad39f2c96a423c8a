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

"""Logic-free block templating for server-side pages.

Markup carries no conditionals or loops: repetition comes from record
sets bound to named blocks, structure from the block tree itself.

Usage::

    from plume.templates import Template

    template = Template()
    template.load_from_string(
        "<ul><!--START:Row--><li>{{Name}}</li><!--END:Row--></ul>", "Main",
    )
    template.assign([{"Name": "A"}, {"Name": "B"}], "Main:Row")
    template.render("Main")  # '<ul><li>A</li><li>B</li></ul>'
"""

from plume.templates.blocks import Block, Renderable
from plume.templates.engine import Template, get_template, reset_template
from plume.templates.errors import (
    AddressNotFound,
    InvalidCallback,
    InvalidDataShape,
    SourceUnreadable,
    TemplateError,
)
from plume.templates.loader import TemplateLoader
from plume.templates.views import View

__all__ = [
    "AddressNotFound",
    "Block",
    "InvalidCallback",
    "InvalidDataShape",
    "Renderable",
    "SourceUnreadable",
    "Template",
    "TemplateError",
    "TemplateLoader",
    "View",
    "get_template",
    "reset_template",
]
