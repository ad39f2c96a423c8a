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

"""Quote protection for multi-pass substitution.

Raw markup is encoded before parsing so that literal quote characters
survive the regex passes of the renderer untouched; the rendered output
is decoded as the very last substitution step.  The sentinels are
Unicode private-use code points, which never occur in real markup.
"""

from __future__ import annotations

SINGLE_QUOTE_SENTINEL = "\ue000"
DOUBLE_QUOTE_SENTINEL = "\ue001"

_ENCODE_TABLE = str.maketrans({"'": SINGLE_QUOTE_SENTINEL, '"': DOUBLE_QUOTE_SENTINEL})
_DECODE_TABLE = str.maketrans({SINGLE_QUOTE_SENTINEL: "'", DOUBLE_QUOTE_SENTINEL: '"'})
_PROTECT_TABLE = str.maketrans(
    {SINGLE_QUOTE_SENTINEL: "&#xE000;", DOUBLE_QUOTE_SENTINEL: "&#xE001;"}
)


def encode(text: str) -> str:
    """Replace literal quote characters with their sentinels."""
    return text.translate(_ENCODE_TABLE)


def decode(text: str) -> str:
    """Inverse of :func:`encode`."""
    return text.translate(_DECODE_TABLE)


def protect(text: str) -> str:
    """Turn sentinels that arrived in bound data into character references.

    Substituted values must never decode into quote characters.
    """
    return text.translate(_PROTECT_TABLE)
