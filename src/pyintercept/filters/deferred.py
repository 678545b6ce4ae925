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
"""DeferredFilterTable — filters held for classes that are not resolvable yet."""

from __future__ import annotations

import logging

from pyintercept.filters.positions import index_of
from pyintercept.filters.types import FilterEntry

logger = logging.getLogger(__name__)


class DeferredFilterTable:
    """Write-ahead table of filters keyed by target identifier and method.

    Entries are consumed exactly once: :meth:`drain` removes and returns them
    the first time the target's method runs.
    """

    def __init__(self) -> None:
        self._pending: dict[str, dict[str, list[FilterEntry]]] = {}

    def defer(self, target_id: str, operation: str, entry: FilterEntry) -> None:
        """Hold *entry* for ``target_id.operation``; named entries upsert."""
        entries = self._pending.setdefault(target_id, {}).setdefault(operation, [])
        if entry.name is not None:
            existing = index_of(entries, entry.name)
            if existing is not None:
                entries[existing] = entry
                return
        entries.append(entry)
        logger.debug("Deferred filter %r for %s.%s", entry.name, target_id, operation)

    def has_deferred(self, target_id: str, operation: str) -> bool:
        return operation in self._pending.get(target_id, {})

    def drain(self, target_id: str, operation: str) -> list[FilterEntry]:
        """Remove and return the entries held for ``target_id.operation``."""
        methods = self._pending.get(target_id)
        if methods is None or operation not in methods:
            return []
        entries = methods.pop(operation)
        if not methods:
            del self._pending[target_id]
        logger.debug("Drained %d deferred filter(s) for %s.%s", len(entries), target_id, operation)
        return entries

    def pending(self) -> dict[str, list[str]]:
        """Map of target identifier to the methods that still hold filters."""
        return {target: list(methods) for target, methods in self._pending.items()}

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return sum(len(e) for methods in self._pending.values() for e in methods.values())
