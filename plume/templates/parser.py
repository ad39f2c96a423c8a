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

"""Block parser: turn region-marked markup into a :class:`Block` tree.

Regions are delimited by HTML comments carrying a name::

    <ul>
    <!--START:Row-->
      <li>{{Name}}</li>
    <!--END:Row-->
    </ul>

Each top-level region becomes a child block of the same name and is
replaced in the parent's code by the raw placeholder ``{{{Row}}}``.
Regions nest to any depth; a region is only closed by an end marker
with the same name.  Markers with malformed names stay literal text.
"""

from __future__ import annotations

import re

from plume.templates.blocks import Block

REGION_PATTERN = re.compile(
    r"<!--START:([A-Za-z_]\w*)-->\n?(.*?)\s*<!--END:\1-->\n?",
    re.DOTALL,
)


def child_placeholder(name: str) -> str:
    return "{{{%s}}}" % name


def parse_blocks(source: str) -> Block:
    """Parse *source* (already codec-encoded) into a new block tree."""
    block = Block()

    def _extract(match: re.Match[str]) -> str:
        name, interior = match.group(1), match.group(2)
        block.children[name] = parse_blocks(interior)
        return child_placeholder(name)

    block.code = REGION_PATTERN.sub(_extract, source)
    return block
