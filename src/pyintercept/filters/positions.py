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
"""Position resolution — maps a position directive onto an ordered entry list."""

from __future__ import annotations

from collections.abc import Sequence

from pyintercept.filters.types import After, Append, At, Before, FilterEntry, Position


def index_of(entries: Sequence[FilterEntry], name: str) -> int | None:
    """Return the index of the entry called *name*, or ``None``."""
    for i, entry in enumerate(entries):
        if entry.name is not None and entry.name == name:
            return i
    return None


def resolve_position(entries: Sequence[FilterEntry], position: Position) -> int | None:
    """Resolve *position* to an insertion index within *entries*.

    Returns ``None`` when the directive asks to skip the insertion, i.e. a
    ``Before``/``After`` anchor that is missing while ``apply_if_not_found``
    is false. Exact indexes are clamped to ``[0, len(entries)]``.
    """
    size = len(entries)

    if isinstance(position, Append):
        return size

    if isinstance(position, At):
        return max(0, min(position.index, size))

    if isinstance(position, Before):
        found = index_of(entries, position.name)
        if found is not None:
            return found
        return 0 if position.apply_if_not_found else None

    if isinstance(position, After):
        found = index_of(entries, position.name)
        if found is not None:
            return found + 1
        return size if position.apply_if_not_found else None

    raise TypeError(f"Unknown position directive: {position!r}")


def build_positions(
    *,
    at: int | None = None,
    before: str | None = None,
    after: str | None = None,
    apply_if_not_found: bool = True,
) -> list[Position]:
    """Translate keyword positioning options into directives.

    Each option given yields its own directive, in the order ``before``,
    ``after``, ``at``. An empty list means plain append.
    """
    positions: list[Position] = []
    if before:
        positions.append(Before(before, apply_if_not_found))
    if after:
        positions.append(After(after, apply_if_not_found))
    if at is not None:
        positions.append(At(at))
    return positions
