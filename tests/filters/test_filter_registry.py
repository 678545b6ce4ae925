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
"""Tests for FilterRegistry: targets, deferred filters and class-level execution."""

from __future__ import annotations

import pytest

from pyintercept.core.config import Config
from pyintercept.filters import registry as registry_module
from pyintercept.filters.registry import (
    FilterRegistry,
    get_default_registry,
    registry_for,
    set_default_registry,
    target_id,
)
from pyintercept.filters.settings import FilterSettings
from pyintercept.filters.store import apply_to_store
from pyintercept.filters.types import FilterEntry
from pyintercept.kernel.exceptions import InvalidFilterException, UnresolvableTargetException


class Ledger:
    """A plain class with no façade, registered by hand."""


def _base(subject, params, chain):
    return "base"


def _counting(calls: list, label: str):
    def interceptor(subject, params, chain):
        calls.append(label)
        return chain.next(subject, params, chain)

    return interceptor


class TestTargets:
    def test_default_identifier(self) -> None:
        assert target_id(Ledger) == f"{Ledger.__module__}.Ledger"

    def test_register_and_resolve(self) -> None:
        registry = FilterRegistry()
        assert registry.register_target(Ledger, "books.Ledger") == "books.Ledger"
        assert registry.resolve("books.Ledger") is Ledger
        assert registry.target("books.Ledger") is Ledger
        assert registry.identifier_for(Ledger) == "books.Ledger"

    def test_unknown_target(self) -> None:
        registry = FilterRegistry()
        assert registry.resolve("books.Missing") is None
        with pytest.raises(UnresolvableTargetException) as exc_info:
            registry.target("books.Missing")
        assert exc_info.value.context["target"] == "books.Missing"

    def test_rebinding_identifier(self) -> None:
        registry = FilterRegistry()

        class Other:
            pass

        registry.register_target(Ledger, "books.Ledger")
        registry.register_target(Other, "books.Ledger")
        assert registry.resolve("books.Ledger") is Other


class TestApplyLazy:
    def test_deferred_until_first_run(self) -> None:
        registry = FilterRegistry()
        calls: list = []
        registry.apply_lazy("books.Ledger", "close", _counting(calls, "F"), name="F")

        assert registry.has_deferred("books.Ledger", "close") is True
        assert registry.store_for(Ledger).get("close") == []

        registry.register_target(Ledger, "books.Ledger")
        assert registry.has_deferred("books.Ledger", "close") is True

        assert registry.run(Ledger, "close", {}, _base) == "base"
        assert calls == ["F"]
        assert registry.has_deferred("books.Ledger", "close") is False
        assert [e.name for e in registry.store_for(Ledger).get("close")] == ["F"]

        registry.run(Ledger, "close", {}, _base)
        assert calls == ["F", "F"]

    def test_deferred_entries_run_first_then_persist_at_end(self) -> None:
        registry = FilterRegistry()
        calls: list = []
        registry.apply_lazy("books.Ledger", "close", _counting(calls, "lazy"), name="lazy")
        apply_to_store(registry.store_for(Ledger), "close", _counting(calls, "stored"), name="stored")
        registry.register_target(Ledger, "books.Ledger")

        registry.run(Ledger, "close", {}, _base)
        assert calls == ["lazy", "stored"]

        calls.clear()
        registry.run(Ledger, "close", {}, _base)
        assert calls == ["stored", "lazy"]

    def test_stored_filter_wins_over_deferred_of_same_name(self) -> None:
        registry = FilterRegistry()
        calls: list = []
        stored = _counting(calls, "stored-audit")
        registry.apply_lazy("books.Ledger", "total", _counting(calls, "deferred-audit"), name="audit")
        apply_to_store(registry.store_for(Ledger), "total", stored, name="audit")
        registry.register_target(Ledger, "books.Ledger")

        keys: list = []

        def base(subject, params, chain):
            keys.append(chain.keys())
            return "base"

        registry.run(Ledger, "total", {}, base)
        assert calls == ["stored-audit"]
        assert keys == [["audit", 1]]

        calls.clear()
        registry.run(Ledger, "total", {}, base)
        assert calls == ["stored-audit"]
        assert registry.has_deferred("books.Ledger", "total") is False
        assert registry.store_for(Ledger).find("total", "audit").callback is stored
        assert len(registry.store_for(Ledger).get("total")) == 1

    def test_per_call_filter_replaces_stored_of_same_name(self) -> None:
        registry = FilterRegistry()
        calls: list = []
        stored = _counting(calls, "stored")
        apply_to_store(registry.store_for(Ledger), "close", stored, name="audit")

        registry.run(Ledger, "close", {}, _base, [FilterEntry(_counting(calls, "adhoc"), "audit")])
        assert calls == ["adhoc"]

        calls.clear()
        registry.run(Ledger, "close", {}, _base)
        assert calls == ["stored"]
        assert registry.store_for(Ledger).find("close", "audit").callback is stored

    def test_resolvable_target_applies_immediately(self) -> None:
        registry = FilterRegistry()
        registry.register_target(Ledger, "books.Ledger")
        registry.apply_lazy("books.Ledger", "close", _counting([], "F"), name="F")

        assert registry.has_deferred("books.Ledger", "close") is False
        assert [e.name for e in registry.store_for(Ledger).get("close")] == ["F"]

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(InvalidFilterException):
            FilterRegistry().apply_lazy("books.Ledger", "close", None)  # type: ignore[arg-type]


class TestRun:
    def test_fast_path_without_filters(self) -> None:
        registry = FilterRegistry()
        seen: list = []

        def base(subject, params, chain):
            seen.append((subject, chain))
            return params["n"] + 1

        assert registry.run(Ledger, "close", {"n": 1}, base) == 2
        assert seen == [(Ledger, None)]

    def test_run_registers_unknown_class(self) -> None:
        registry = FilterRegistry()
        registry.run(Ledger, "close", {}, _base)
        assert registry.resolve(target_id(Ledger)) is Ledger

    def test_per_call_filters_not_persisted(self) -> None:
        registry = FilterRegistry()
        calls: list = []
        registry.run(Ledger, "close", {}, _base, [_counting(calls, "adhoc")])
        registry.run(Ledger, "close", {}, _base)
        assert calls == ["adhoc"]
        assert registry.store_for(Ledger).get("close") == []

    def test_trace_logging(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = FilterRegistry(FilterSettings(trace=True))
        apply_to_store(registry.store_for(Ledger), "close", _counting([], "F"), name="F")

        with caplog.at_level("DEBUG", logger="pyintercept.filters.chain"):
            registry.run(Ledger, "close", {}, _base)

        assert any("Ledger.close" in r.getMessage() for r in caplog.records)


class TestLifecycle:
    def test_reset_keeps_targets(self) -> None:
        registry = FilterRegistry()
        registry.register_target(Ledger, "books.Ledger")
        apply_to_store(registry.store_for(Ledger), "close", _counting([], "F"))
        registry.apply_lazy("books.Other", "open", _counting([], "G"))

        registry.reset()

        assert registry.has_store(Ledger) is False
        assert registry.has_deferred("books.Other", "open") is False
        assert registry.resolve("books.Ledger") is Ledger

    def test_from_config(self) -> None:
        config = Config({"pyintercept": {"filters": {"trace": True, "apply-if-position-not-found": False}}})
        registry = FilterRegistry.from_config(config)
        assert registry.settings.trace is True
        assert registry.settings.apply_if_position_not_found is False

    def test_from_empty_config_uses_defaults(self) -> None:
        registry = FilterRegistry.from_config(Config({}))
        assert registry.settings == FilterSettings()


class TestDefaultRegistry:
    def test_set_returns_previous(self) -> None:
        original = get_default_registry()
        replacement = FilterRegistry()
        assert set_default_registry(replacement) is original
        assert get_default_registry() is replacement

    def test_registry_for_prefers_injected(self) -> None:
        own = FilterRegistry()

        class WithRegistry:
            __filter_registry__ = own

        assert registry_for(WithRegistry) is own
        assert registry_for(Ledger) is get_default_registry()

    def test_module_level_helpers(self) -> None:
        registry_module.apply_lazy("books.Journal", "post", _counting([], "F"))
        assert registry_module.has_deferred("books.Journal", "post") is True
        assert get_default_registry().has_deferred("books.Journal", "post") is True
