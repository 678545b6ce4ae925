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
"""FilterStore — per-target ordered filter lists, keyed by operation name."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pyintercept.filters.positions import build_positions, index_of, resolve_position
from pyintercept.filters.types import REMOVE_ALL, Append, FilterEntry, Interceptor, Position, Selector
from pyintercept.kernel.exceptions import InvalidFilterException

logger = logging.getLogger(__name__)


class FilterStore:
    """Ordered filter entries for every filterable operation of one target.

    Usage::

        store = FilterStore()
        store.insert("save", FilterEntry(audit, name="audit"))
        store.insert("save", FilterEntry(validate, name="validate"), [Before("audit")])

        [e.name for e in store.get("save")]  # ["validate", "audit"]
    """

    def __init__(self) -> None:
        self._entries: dict[str, list[FilterEntry]] = {}

    def operations(self) -> list[str]:
        """Names of operations that have an entry list (possibly empty)."""
        return list(self._entries)

    def get(self, operation: str) -> list[FilterEntry]:
        """Return a copy of the entries for *operation*, in chain order."""
        return list(self._entries.get(operation, ()))

    def has_filters(self, operation: str) -> bool:
        return bool(self._entries.get(operation))

    def find(self, operation: str, name: str) -> FilterEntry | None:
        entries = self._entries.get(operation, [])
        found = index_of(entries, name)
        return entries[found] if found is not None else None

    def set_all(self, operation: str | Selector, entries: Iterable[FilterEntry] = ()) -> None:
        """Replace the entries of *operation*.

        ``REMOVE_ALL`` clears every operation of this target, not just one.
        """
        if operation is REMOVE_ALL:
            self._entries.clear()
            return
        self._entries[operation] = list(entries)

    def clear(self) -> None:
        self._entries.clear()

    def insert(self, operation: str, entry: FilterEntry, positions: Sequence[Position] = ()) -> int:
        """Insert *entry* once per directive in *positions*.

        With no directives (or a single ``Append``) a named entry is upserted:
        an existing entry with the same name keeps its slot and takes the new
        callback. Unnamed entries are appended.

        A named entry placed by ``At``/``Before``/``After`` moves: any entry
        with the same name is taken out before the index is resolved.

        Returns:
            The number of insertions performed (skipped directives excluded).
        """
        entries = self._entries.setdefault(operation, [])

        if not positions:
            positions = (Append(),)

        inserted = 0
        for position in positions:
            if isinstance(position, Append) and entry.name is not None:
                existing = index_of(entries, entry.name)
                if existing is not None:
                    entries[existing] = entry
                    inserted += 1
                    continue

            if entry.name is not None:
                remaining = [e for e in entries if e.name != entry.name]
            else:
                remaining = entries

            index = resolve_position(remaining, position)
            if index is None:
                logger.debug(
                    "Skipped filter %r on %r: anchor %r not found", entry.name, operation, position
                )
                continue

            if remaining is not entries:
                entries[:] = remaining
            entries.insert(index, entry)
            inserted += 1
        return inserted

    def remove_by_name(self, operation: str, name: str) -> bool:
        entries = self._entries.get(operation)
        if not entries:
            return False
        found = index_of(entries, name)
        if found is None:
            return False
        del entries[found]
        return True

    def replace_by_name(self, operation: str, name: str, callback: Interceptor) -> bool:
        """Swap the callback of the entry called *name*; never inserts."""
        entries = self._entries.get(operation)
        if not entries:
            return False
        found = index_of(entries, name)
        if found is None:
            return False
        entries[found] = FilterEntry(callback, name)
        return True

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __repr__(self) -> str:
        summary = {op: [e.name for e in entries] for op, entries in self._entries.items()}
        return f"FilterStore({summary!r})"


def method_names(method: str | Iterable[str]) -> list[str]:
    """Normalise a method selector into a list of operation names."""
    if isinstance(method, str):
        names = [method]
    else:
        names = list(method)
    if not names or not all(isinstance(m, str) and m for m in names):
        raise InvalidFilterException(
            f"Invalid method selector: {method!r}",
            code="FILTER_INVALID_METHOD",
            context={"method": method},
        )
    return names


def apply_to_store(
    store: FilterStore,
    method: str | Iterable[str] | Selector,
    interceptor: Interceptor | bool,
    *,
    name: str | None = None,
    at: int | None = None,
    before: str | None = None,
    after: str | None = None,
    apply_if_position_not_found: bool = True,
) -> None:
    """Registration logic shared by the instance and class façades.

    ``REMOVE_ALL`` as *method* clears every operation of the target. Passing
    ``False`` as *interceptor* resets the selected operations and inserts
    nothing. Otherwise the interceptor is inserted once per method name and
    once per positioning option given.
    """
    if method is REMOVE_ALL:
        store.set_all(REMOVE_ALL)
        return

    names = method_names(method)  # type: ignore[arg-type]

    if interceptor is not False and not callable(interceptor):
        raise InvalidFilterException(
            f"Filter for {names!r} is not callable: {interceptor!r}",
            code="FILTER_NOT_CALLABLE",
            context={"method": names, "name": name},
        )
    if at is not None and (isinstance(at, bool) or not isinstance(at, int)):
        raise InvalidFilterException(
            f"Filter position 'at' must be an int, got {at!r}",
            code="FILTER_INVALID_POSITION",
            context={"method": names, "at": at},
        )

    positions = build_positions(
        at=at, before=before, after=after, apply_if_not_found=apply_if_position_not_found
    )

    for m in names:
        if interceptor is False:
            store.set_all(m, ())
            continue
        count = store.insert(m, FilterEntry(interceptor, name), positions)  # type: ignore[arg-type]
        logger.debug("Applied filter %r to %r (%d insertion(s))", name, m, count)


def describe(entries: Sequence[FilterEntry]) -> list[Any]:
    """Identifiers of *entries*: the name, or the index for unnamed ones."""
    return [e.name if e.name is not None else i for i, e in enumerate(entries)]
