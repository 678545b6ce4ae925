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
"""Filter registry and chain engine."""

from pyintercept.filters.chain import FilterChain, build_chain, merge_entries, run_chain
from pyintercept.filters.decorators import filterable, filterable_operations
from pyintercept.filters.deferred import DeferredFilterTable
from pyintercept.filters.positions import resolve_position
from pyintercept.filters.registry import (
    FilterRegistry,
    apply_lazy,
    get_default_registry,
    has_deferred,
    reset_default_registry,
    set_default_registry,
)
from pyintercept.filters.settings import FilterSettings
from pyintercept.filters.store import FilterStore
from pyintercept.filters.types import REMOVE_ALL, After, Append, At, Before, FilterEntry, Position

__all__ = [
    "REMOVE_ALL",
    "After",
    "Append",
    "At",
    "Before",
    "DeferredFilterTable",
    "FilterChain",
    "FilterEntry",
    "FilterRegistry",
    "FilterSettings",
    "FilterStore",
    "Position",
    "apply_lazy",
    "build_chain",
    "filterable",
    "filterable_operations",
    "get_default_registry",
    "has_deferred",
    "merge_entries",
    "reset_default_registry",
    "resolve_position",
    "run_chain",
    "set_default_registry",
]
