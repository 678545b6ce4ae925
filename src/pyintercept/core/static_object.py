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
"""FilteredClass — base class for classes with filterable classmethods.

Filters live in a :class:`~pyintercept.filters.registry.FilterRegistry`,
keyed by class, so every caller shares them. Each subclass is registered as a
resolvable target when it is defined, under ``module.QualName`` or the
``target=`` class keyword::

    class Rates(FilteredClass, target="billing.Rates"):
        @classmethod
        @filterable
        def lookup(cls, currency):
            ...

    apply_lazy("billing.Rates", "lookup", cache_filter, name="cache")
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable, Sequence
from typing import Any, ClassVar

from pyintercept.core.object import parents_of
from pyintercept.filters.chain import Base
from pyintercept.filters.decorators import filterable_operations
from pyintercept.filters.registry import FilterRegistry, registry_for
from pyintercept.filters.store import apply_to_store
from pyintercept.filters.types import REMOVE_ALL, FilterEntry, Interceptor, Selector
from pyintercept.kernel.exceptions import InvalidFilterException

logger = logging.getLogger(__name__)


class FilteredClass:
    """Class-scoped filter façade.

    Set ``__filter_registry__`` on a subclass to give it (and its own
    subclasses) a dedicated registry instead of the default one.
    """

    __filter_registry__: ClassVar[FilterRegistry | None] = None

    def __init_subclass__(cls, target: str | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        ident = cls.filter_registry().register_target(cls, target)
        logger.debug("Registered filter target %s (%s)", ident, ", ".join(filterable_operations(cls)) or "-")

    @classmethod
    def filter_registry(cls) -> FilterRegistry:
        return registry_for(cls)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    @classmethod
    def apply_filter(
        cls,
        method: str | Iterable[str] | Selector,
        interceptor: Interceptor | bool | None = None,
        *,
        name: str | None = None,
        at: int | None = None,
        before: str | None = None,
        after: str | None = None,
        apply_if_position_not_found: bool | None = None,
    ) -> Callable[[Interceptor], Interceptor] | None:
        """Apply a filter to one or more classmethods of this class.

        Same options as :meth:`FilteredObject.apply_filter`. ``REMOVE_ALL``
        drops every filter of this class (other classes keep theirs).
        """
        if interceptor is None and method is not REMOVE_ALL:

            def decorator(fn: Interceptor) -> Interceptor:
                cls.apply_filter(
                    method,
                    fn,
                    name=name,
                    at=at,
                    before=before,
                    after=after,
                    apply_if_position_not_found=apply_if_position_not_found,
                )
                return fn

            return decorator

        registry = cls.filter_registry()
        if apply_if_position_not_found is None:
            apply_if_position_not_found = registry.settings.apply_if_position_not_found
        apply_to_store(
            registry.store_for(cls),
            method,
            interceptor,  # type: ignore[arg-type]
            name=name,
            at=at,
            before=before,
            after=after,
            apply_if_position_not_found=apply_if_position_not_found,
        )
        return None

    @classmethod
    def get_filter(cls, method: str, name: str) -> Interceptor | None:
        if not method or name is None:
            return None
        entry = cls.filter_registry().store_for(cls).find(method, name)
        return entry.callback if entry is not None else None

    @classmethod
    def get_filters(cls, method: str) -> list[FilterEntry]:
        if not method:
            return []
        return cls.filter_registry().store_for(cls).get(method)

    @classmethod
    def remove_filter(cls, method: str, name: str) -> bool:
        if not method or name is None:
            return False
        return cls.filter_registry().store_for(cls).remove_by_name(method, name)

    @classmethod
    def replace_filter(cls, method: str, name: str, interceptor: Interceptor) -> bool:
        if not method or name is None:
            return False
        if not callable(interceptor):
            raise InvalidFilterException(
                f"Replacement filter '{name}' for '{cls.__qualname__}.{method}' is not callable",
                code="FILTER_NOT_CALLABLE",
                context={"method": method, "name": name},
            )
        return cls.filter_registry().store_for(cls).replace_by_name(method, name, interceptor)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    @classmethod
    def run_filtered(
        cls,
        method: str,
        params: dict[str, Any],
        callback: Base,
        filters: Iterable[FilterEntry | Interceptor] = (),
    ) -> Any:
        """Run *callback* as the body of ``cls.method``, wrapped in its filters.

        Filters deferred with ``apply_lazy`` for this class are applied on the
        first call. ``callback`` receives the class as its subject.
        """
        return cls.filter_registry().run(cls, method, params, callback, filters)

    @classmethod
    def invoke_method(cls, method: str, params: Sequence[Any] = ()) -> Any:
        return getattr(cls, method)(*params)

    @classmethod
    def _parents(cls) -> tuple[type, ...]:
        return parents_of(cls)

    @classmethod
    def _stop(cls, status: int = 0) -> None:
        sys.exit(status)
