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
"""FilterRegistry — process-wide filter state for class-level filters.

Holds one :class:`FilterStore` per class, the table of filters deferred for
classes that are not resolvable yet, and the table of resolvable targets.
Class façades receive their registry explicitly (``__filter_registry__``)
or fall back to the default registry managed by this module.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pyintercept.filters.chain import Base, run_chain
from pyintercept.filters.deferred import DeferredFilterTable
from pyintercept.filters.settings import FilterSettings
from pyintercept.filters.store import FilterStore, apply_to_store
from pyintercept.filters.types import FilterEntry, Interceptor
from pyintercept.kernel.exceptions import InvalidFilterException, UnresolvableTargetException

if TYPE_CHECKING:
    from pyintercept.core.config import Config

logger = logging.getLogger(__name__)


def target_id(cls: type) -> str:
    """Default identifier of a class: ``module.QualName``."""
    return f"{cls.__module__}.{cls.__qualname__}"


class FilterRegistry:
    """Registry of class-level filters, deferred filters and resolvable targets.

    Usage::

        registry = FilterRegistry()
        registry.apply_lazy("billing.Invoice", "total", add_tax, name="tax")
        registry.has_deferred("billing.Invoice", "total")  # True

        registry.register_target(Invoice, "billing.Invoice")
        registry.run(Invoice, "total", {"amount": 10}, base)  # add_tax runs
    """

    def __init__(self, settings: FilterSettings | None = None) -> None:
        self.settings = settings or FilterSettings()
        self._stores: dict[type, FilterStore] = {}
        self._targets: dict[str, type] = {}
        self._identifiers: dict[type, str] = {}
        self._deferred = DeferredFilterTable()

    @classmethod
    def from_config(cls, config: Config) -> FilterRegistry:
        return cls(config.bind(FilterSettings))

    @property
    def deferred(self) -> DeferredFilterTable:
        return self._deferred

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def register_target(self, cls: type, identifier: str | None = None) -> str:
        """Make *cls* resolvable under *identifier* (``module.QualName`` by default).

        Registering a new class under an identifier already in use rebinds it
        (e.g. after a module reload).
        """
        ident = identifier or target_id(cls)
        previous = self._targets.get(ident)
        if previous is not None and previous is not cls:
            logger.debug("Rebinding filter target %s from %r to %r", ident, previous, cls)
        self._targets[ident] = cls
        self._identifiers[cls] = ident
        return ident

    def resolve(self, identifier: str) -> type | None:
        return self._targets.get(identifier)

    def target(self, identifier: str) -> type:
        """Like :meth:`resolve`, but raises when *identifier* is unknown."""
        cls = self._targets.get(identifier)
        if cls is None:
            raise UnresolvableTargetException(
                f"No filterable class registered as '{identifier}'",
                code="TARGET_UNRESOLVABLE",
                context={"target": identifier, "known": sorted(self._targets)},
            )
        return cls

    def identifier_for(self, cls: type) -> str:
        return self._identifiers.get(cls) or target_id(cls)

    def targets(self) -> dict[str, type]:
        return dict(self._targets)

    # ------------------------------------------------------------------
    # Stores
    # ------------------------------------------------------------------

    def store_for(self, cls: type) -> FilterStore:
        """The filter store of *cls*, created on first use."""
        store = self._stores.get(cls)
        if store is None:
            store = self._stores[cls] = FilterStore()
        return store

    def has_store(self, cls: type) -> bool:
        return cls in self._stores

    # ------------------------------------------------------------------
    # Deferred filters
    # ------------------------------------------------------------------

    def apply_lazy(
        self,
        target: str,
        method: str,
        interceptor: Interceptor,
        name: str | None = None,
    ) -> None:
        """Apply a filter to a class that may not be loaded yet.

        When *target* is already resolvable the filter is applied right away.
        Otherwise it is held and applied the first time ``target.method`` runs.
        """
        if not callable(interceptor):
            raise InvalidFilterException(
                f"Filter for {target}.{method} is not callable: {interceptor!r}",
                code="FILTER_NOT_CALLABLE",
                context={"target": target, "method": method, "name": name},
            )

        cls = self.resolve(target)
        if cls is None:
            self._deferred.defer(target, method, FilterEntry(interceptor, name))
            return

        apply_filter = getattr(cls, "apply_filter", None)
        if callable(apply_filter):
            apply_filter(method, interceptor, name=name)
        else:
            apply_to_store(self.store_for(cls), method, interceptor, name=name)

    def has_deferred(self, target: str, method: str) -> bool:
        """Whether filters for ``target.method`` are still held, not yet applied."""
        return self._deferred.has_deferred(target, method)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(
        self,
        cls: type,
        method: str,
        params: dict[str, Any],
        callback: Base,
        filters: Iterable[FilterEntry | Interceptor] = (),
    ) -> Any:
        """Run *callback* for ``cls.method`` through its filter chain.

        Deferred filters for the class are drained on the first call: they run
        at the front of that chain and are appended to the class's store, so
        later calls run them as ordinary filters. A filter already stored under
        the same name wins, both in that first chain and afterwards.
        """
        filters = list(filters)
        ident = self._identifiers.get(cls)
        if ident is None:
            ident = self.register_target(cls)

        store = self._stores.get(cls)
        has_stored = store is not None and store.has_filters(method)
        if not has_stored and not filters and not self._deferred.has_deferred(ident, method):
            return callback(cls, params, None)

        store = self.store_for(cls)
        stored = store.get(method)
        deferred = self._deferred.drain(ident, method)
        for entry in deferred:
            if entry.name is not None and store.find(method, entry.name) is not None:
                continue
            store.insert(method, entry)

        return run_chain(
            cls,
            params,
            callback,
            stored,
            filters,
            deferred,
            target=cls.__qualname__,
            method=method,
            trace=self.settings.trace,
        )

    def reset(self) -> None:
        """Drop every class filter and deferred filter; resolvable targets stay."""
        self._stores.clear()
        self._deferred.clear()


_default_registry: FilterRegistry | None = None


def get_default_registry() -> FilterRegistry:
    """The registry used by class façades that do not carry their own."""
    global _default_registry
    if _default_registry is None:
        _default_registry = FilterRegistry()
    return _default_registry


def set_default_registry(registry: FilterRegistry) -> FilterRegistry:
    """Install *registry* as the default and return the previous one."""
    global _default_registry
    previous = get_default_registry()
    _default_registry = registry
    return previous


def registry_for(cls: type) -> FilterRegistry:
    """The registry injected on *cls* through ``__filter_registry__``, or the default."""
    registry = getattr(cls, "__filter_registry__", None)
    return registry if registry is not None else get_default_registry()


def reset_default_registry() -> None:
    """Clear the default registry's filters; meant for test isolation."""
    get_default_registry().reset()


def apply_lazy(target: str, method: str, interceptor: Interceptor, name: str | None = None) -> None:
    """:meth:`FilterRegistry.apply_lazy` on the default registry."""
    get_default_registry().apply_lazy(target, method, interceptor, name)


def has_deferred(target: str, method: str) -> bool:
    """:meth:`FilterRegistry.has_deferred` on the default registry."""
    return get_default_registry().has_deferred(target, method)
