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
"""Filter core types — FilterEntry, position directives and selector markers."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from pyintercept.filters.chain import FilterChain

Interceptor = Callable[[Any, dict[str, Any], "FilterChain | None"], Any]
"""``(subject, params, chain) -> result``."""


class Selector(Enum):
    """Special method selectors accepted by ``apply_filter``."""

    REMOVE_ALL = "remove_all"


REMOVE_ALL = Selector.REMOVE_ALL


@dataclass
class FilterEntry:
    """One registered interceptor.

    Attributes:
        callback: The interceptor, called as ``callback(subject, params, chain)``.
        name: Optional unique name. Unnamed entries are positional only.
    """

    callback: Interceptor
    name: str | None = None

    def __call__(self, subject: Any, params: dict[str, Any], chain: FilterChain | None) -> Any:
        return self.callback(subject, params, chain)


# ---------------------------------------------------------------------------
# Position directives
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Append:
    """Insert at the end of the chain (upsert by name for named entries)."""


@dataclass(frozen=True)
class At:
    """Insert at an exact index, clamped to the current bounds."""

    index: int


@dataclass(frozen=True)
class Before:
    """Insert in front of the entry called *name*.

    When *name* is absent the entry goes first, or is skipped when
    *apply_if_not_found* is false.
    """

    name: str
    apply_if_not_found: bool = True


@dataclass(frozen=True)
class After:
    """Insert right behind the entry called *name*.

    When *name* is absent the entry goes last, or is skipped when
    *apply_if_not_found* is false.
    """

    name: str
    apply_if_not_found: bool = True


Position = Union[Append, At, Before, After]
