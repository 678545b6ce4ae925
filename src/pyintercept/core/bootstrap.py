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
"""Bootstrap — configure logging and install the default filter registry."""

from __future__ import annotations

from pathlib import Path

from pyintercept.core.config import Config
from pyintercept.filters.registry import FilterRegistry, set_default_registry
from pyintercept.logging.port import LoggingPort
from pyintercept.logging.structlog_adapter import StructlogAdapter


def configure(
    config: Config | str | Path | None = None,
    *,
    logging_adapter: LoggingPort | None = None,
    active_profiles: list[str] | None = None,
) -> FilterRegistry:
    """Configure pyintercept for an application and return the new default registry.

    Startup sequence:
    1. Load configuration (library defaults when *config* is ``None``, or a
       YAML/TOML file path merged over the defaults)
    2. Configure logging through *logging_adapter* (structlog by default)
    3. Bind ``pyintercept.filters`` into ``FilterSettings``
    4. Install a fresh default registry; resolvable targets of the previous
       registry carry over, its filters do not
    """
    if config is None:
        config = Config.defaults()
    elif not isinstance(config, Config):
        config = Config.from_file(config, active_profiles=active_profiles)

    adapter = logging_adapter or StructlogAdapter()
    adapter.configure(config)
    logger = adapter.get_logger("pyintercept.core")

    registry = FilterRegistry.from_config(config)
    previous = set_default_registry(registry)
    for ident, cls in previous.targets().items():
        registry.register_target(cls, ident)

    logger.info(
        "filters_configured",
        apply_if_position_not_found=registry.settings.apply_if_position_not_found,
        trace=registry.settings.trace,
        targets=len(registry.targets()),
        sources=config.loaded_sources,
    )
    return registry
