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

"""Error taxonomy for the template engine.

Every condition raised by :mod:`plume.templates` derives from
:class:`TemplateError`, so callers can catch the whole family at once.
Unregistered masks are deliberately not an error.
"""

from __future__ import annotations


class TemplateError(Exception):
    """Base class for all template engine errors."""


class AddressNotFound(TemplateError):
    """A block address could not be resolved and creation was not allowed."""

    def __init__(self, address: str, message: str | None = None) -> None:
        self.address = address
        super().__init__(message or f"No block at address {address!r}")


class InvalidDataShape(TemplateError):
    """Data bound to a block is not a well-formed record or record set."""


class InvalidCallback(TemplateError):
    """A mask or processor registration target is not callable."""


class SourceUnreadable(TemplateError):
    """The loader could not obtain template text."""

    def __init__(self, name: str, reason: str = "") -> None:
        self.name = name
        detail = f": {reason}" if reason else ""
        super().__init__(f"Template source {name!r} could not be read{detail}")
