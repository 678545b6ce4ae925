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
"""FilterSettings — the ``pyintercept.filters`` configuration section."""

from __future__ import annotations

from pydantic import BaseModel

from pyintercept.core.config import config_properties


@config_properties(prefix="pyintercept.filters")
class FilterSettings(BaseModel):
    """Registry-wide filter behaviour.

    Attributes:
        apply_if_position_not_found: Default for ``apply_filter`` calls that
            position a filter relative to a name that is not registered.
        trace: Log every chain advance at DEBUG level.
    """

    apply_if_position_not_found: bool = True
    trace: bool = False
