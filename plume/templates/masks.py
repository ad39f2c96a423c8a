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

"""Mask and post-processor registry.

Masks are named value transforms chained inside placeholders, e.g.
``{{Price|currency|bold}}``.  A mask is registered with optional bound
parameters which are passed after the value::

    registry.register_mask("truncate", lambda value, limit: value[:limit], 20)

Processors transform the whole rendered page, in registration order.
Each registry belongs to one :class:`~plume.templates.engine.Template`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from plume.templates.errors import InvalidCallback

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mask:
    """A registered mask: callback plus its bound trailing parameters."""

    name: str
    callback: Callable[..., Any]
    params: tuple[Any, ...] = ()

    def __call__(self, value: Any) -> Any:
        return self.callback(value, *self.params)


class MaskRegistry:
    """Named masks (last registration wins) and an append-only processor list."""

    def __init__(self) -> None:
        self._masks: dict[str, Mask] = {}
        self._processors: list[Callable[[str], str]] = []

    def register_mask(self, name: str, callback: Callable[..., Any], *params: Any) -> None:
        if not callable(callback):
            raise InvalidCallback(f"Callback for mask named {name!r} is not callable")
        if name in self._masks:
            logger.debug("Mask %r re-registered", name)
        self._masks[name] = Mask(name=name, callback=callback, params=params)

    def register_processor(self, callback: Callable[[str], str]) -> None:
        if not callable(callback):
            raise InvalidCallback("Requested post-processor is not callable")
        self._processors.append(callback)

    def has_mask(self, name: str) -> bool:
        return name in self._masks

    def apply_mask(self, name: str, value: Any) -> Any:
        """Apply the mask *name* to *value*; unknown masks pass the value through."""
        mask = self._masks.get(name)
        if mask is None:
            logger.debug("Mask %r is not registered, value passed through", name)
            return value
        return mask(value)

    def apply_chain(self, names: Iterable[str], value: Any) -> Any:
        """Apply masks left to right, each consuming the previous result."""
        for name in names:
            value = self.apply_mask(name, value)
        return value

    def run_processors(self, text: str) -> str:
        for processor in self._processors:
            text = processor(text)
        return text

    @property
    def processors(self) -> tuple[Callable[[str], str], ...]:
        return tuple(self._processors)
