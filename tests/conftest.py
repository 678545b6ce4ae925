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
"""Shared fixtures: every test starts with an empty default filter registry."""

from __future__ import annotations

import pytest

from pyintercept.filters.registry import get_default_registry, set_default_registry


@pytest.fixture(autouse=True)
def isolated_filter_registry():
    registry = get_default_registry()
    registry.reset()
    yield registry
    set_default_registry(registry)
    registry.reset()
