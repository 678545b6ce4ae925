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
"""Tests for StructlogAdapter — default LoggingPort implementation."""

import logging

from pyintercept.core.config import Config
from pyintercept.logging.port import LoggingPort
from pyintercept.logging.structlog_adapter import StructlogAdapter


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"
        assert adapter._module_levels == {}

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pyintercept": {"logging": {"level": {"root": "DEBUG"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pyintercept": {"logging": {"format": "JSON"}}}))
        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"pyintercept": {"logging": {"level": {"root": "INFO", "billing.rates": "warning"}}}})
        adapter.configure(config)
        assert adapter._module_levels == {"billing.rates": "WARNING"}
        assert logging.getLogger("billing.rates").level == logging.WARNING

    def test_trace_turns_on_filter_debug_logging(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pyintercept": {"filters": {"trace": True}}}))
        assert adapter._module_levels == {"pyintercept.filters": "DEBUG"}
        assert logging.getLogger("pyintercept.filters").level == logging.DEBUG

    def test_explicit_filter_level_wins_over_trace(self):
        adapter = StructlogAdapter()
        config = Config(
            {
                "pyintercept": {
                    "filters": {"trace": True},
                    "logging": {"level": {"pyintercept.filters": "INFO"}},
                }
            }
        )
        adapter.configure(config)
        assert adapter._module_levels == {"pyintercept.filters": "INFO"}


class TestStructlogAdapterGetLogger:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("pyintercept.test")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "debug", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("pyintercept.custom", "error")
        assert logging.getLogger("pyintercept.custom").level == logging.ERROR
