# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""FilterChain — materialises filters plus the filtered method into one continuation.

Every interceptor takes the same three arguments: ``subject``, ``params``
and ``chain``.

- ``subject`` is the instance whose method is filtered, or the class for
  class-level filters.
- ``params`` is a dict of the method's arguments. Interceptors may inspect or
  modify it before passing control on.
- ``chain`` is the :class:`FilterChain` being executed. The filtered method
  sits at its bottom, which is why most interceptors contain::

      return chain.next(subject, params, chain)

An interceptor that never calls ``next`` short-circuits the rest of the chain
(caching, access control). Calling ``next`` twice advances the shared cursor
twice: the second call picks up wherever the first one left the cursor.

Exceptions raised anywhere in the chain propagate unchanged to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from pyintercept.filters.store import describe
from pyintercept.filters.types import FilterEntry, Interceptor
from pyintercept.kernel.exceptions import ChainExhaustedException, InvalidFilterException

logger = logging.getLogger(__name__)

Base = Callable[[Any, dict[str, Any], "FilterChain | None"], Any]


class FilterChain:
    """Cursor over one invocation's filters, ending in the filtered method.

    Created fresh for every call and discarded afterwards.
    """

    def __init__(
        self,
        entries: Sequence[FilterEntry],
        *,
        target: str | None = None,
        method: str | None = None,
        trace: bool = False,
    ) -> None:
        if not entries:
            raise InvalidFilterException("A filter chain needs at least one link", code="CHAIN_EMPTY")
        self._entries: list[FilterEntry] = list(entries)
        self._position = 0
        self._executed: list[Any] = []
        self._target = target
        self._method = method
        self._trace = trace

    @property
    def position(self) -> int:
        """Index of the link currently holding control."""
        return self._position

    @property
    def executed(self) -> tuple[Any, ...]:
        """Identifiers of the links the cursor has passed, in order."""
        return tuple(self._executed)

    def keys(self) -> list[Any]:
        """Identifiers of every link: the filter name, or its index when unnamed."""
        return describe(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def run(self, subject: Any, params: dict[str, Any]) -> Any:
        """Start the chain by invoking its first link."""
        self._position = 0
        return self._entries[0](subject, params, self)

    def next(self, subject: Any, params: dict[str, Any], chain: FilterChain | None = None) -> Any:
        """Pass control to the next link and return its result.

        *chain* is accepted so interceptors can forward the handle they were
        given; the cursor always advances on ``self``.
        """
        following = self._position + 1
        if following >= len(self._entries):
            raise ChainExhaustedException(
                f"No filter left after position {self._position} in {self.method(full=True)}",
                code="CHAIN_EXHAUSTED",
                context={"method": self._method, "position": self._position},
            )

        self._executed.append(self._identifier(self._position))
        self._position = following
        entry = self._entries[following]
        if self._trace:
            logger.debug(
                "Filter chain %s advanced to %r (%d/%d)",
                self.method(full=True),
                self._identifier(following),
                following,
                len(self._entries) - 1,
            )
        return entry(subject, params, self)

    def current(self) -> FilterEntry:
        """The link currently holding control."""
        return self._entries[self._position]

    def peek(self) -> FilterEntry | None:
        """The link ``next`` would invoke, without moving the cursor; ``None`` at the end."""
        following = self._position + 1
        return self._entries[following] if following < len(self._entries) else None

    def has_run(self, identifier: Any = None) -> bool:
        """Whether the link named (or positioned at) *identifier* has been passed."""
        return identifier in self._executed

    def method(self, full: bool = False) -> str | None:
        """The filtered method's name, prefixed with the target when *full*."""
        if full and self._target:
            return f"{self._target}.{self._method}"
        return self._method

    def _identifier(self, index: int) -> Any:
        name = self._entries[index].name
        return name if name is not None else index

    def __repr__(self) -> str:
        return f"FilterChain(method={self.method(full=True)!r}, keys={self.keys()!r}, position={self._position})"


def as_entries(filters: Iterable[FilterEntry | Interceptor]) -> list[FilterEntry]:
    """Wrap bare callables as unnamed entries."""
    entries: list[FilterEntry] = []
    for f in filters:
        if isinstance(f, FilterEntry):
            entries.append(f)
        elif callable(f):
            entries.append(FilterEntry(f))
        else:
            raise InvalidFilterException(f"Filter is not callable: {f!r}", code="FILTER_NOT_CALLABLE")
    return entries


def merge_entries(*sources: Iterable[FilterEntry]) -> list[FilterEntry]:
    """Concatenate entry lists, keeping one link per name.

    A named entry seen again in a later source takes over the slot of the
    first one. Unnamed entries are always appended.
    """
    merged: list[FilterEntry] = []
    slots: dict[str, int] = {}
    for source in sources:
        for entry in source:
            if entry.name is None:
                merged.append(entry)
                continue
            slot = slots.get(entry.name)
            if slot is None:
                slots[entry.name] = len(merged)
                merged.append(entry)
            else:
                merged[slot] = entry
    return merged


def build_chain(
    base: Base,
    stored: Sequence[FilterEntry] = (),
    filters: Iterable[FilterEntry | Interceptor] = (),
    deferred: Sequence[FilterEntry] = (),
    *,
    target: str | None = None,
    method: str | None = None,
    trace: bool = False,
) -> FilterChain | None:
    """Assemble deferred, stored and per-call filters in front of *base*.

    Names stay unique within the chain: a stored filter replaces a deferred
    one of the same name, and a per-call filter replaces either, each in the
    slot of the first occurrence. Returns ``None`` when there is nothing to
    filter.
    """
    data = merge_entries(deferred, stored, as_entries(filters))
    if not data:
        return None
    data.append(FilterEntry(base))
    return FilterChain(data, target=target, method=method, trace=trace)


def run_chain(
    subject: Any,
    params: dict[str, Any],
    base: Base,
    stored: Sequence[FilterEntry] = (),
    filters: Iterable[FilterEntry | Interceptor] = (),
    deferred: Sequence[FilterEntry] = (),
    *,
    target: str | None = None,
    method: str | None = None,
    trace: bool = False,
) -> Any:
    """Build the chain for one call and execute it.

    With no filters at all *base* is called directly as
    ``base(subject, params, None)``.
    """
    chain = build_chain(
        base, stored, filters, deferred, target=target, method=method, trace=trace
    )
    if chain is None:
        return base(subject, params, None)
    return chain.run(subject, params)
