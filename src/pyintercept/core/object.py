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
"""FilteredObject — base class for objects with filterable instance methods.

Each instance keeps its own filters. A filterable method hands its body to
:meth:`FilteredObject.run_filtered` (or is decorated with ``@filterable``)::

    class Mailer(FilteredObject):
        def send(self, to):
            return self.run_filtered("send", {"to": to}, lambda self, params, chain: deliver(params["to"]))

    mailer = Mailer()

    @mailer.apply_filter("send", name="audit")
    def audit(self, params, chain):
        log.info("sending to %s", params["to"])
        return chain.next(self, params, chain)
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, ClassVar

from pyintercept.filters.chain import Base, run_chain
from pyintercept.filters.registry import registry_for
from pyintercept.filters.store import FilterStore, apply_to_store
from pyintercept.filters.types import REMOVE_ALL, FilterEntry, Interceptor, Selector
from pyintercept.kernel.exceptions import InvalidFilterException

_PARENTS: dict[type, tuple[type, ...]] = {}


def parents_of(cls: type) -> tuple[type, ...]:
    """Ancestors of *cls*, nearest first, ``object`` excluded. Memoised per class."""
    parents = _PARENTS.get(cls)
    if parents is None:
        parents = _PARENTS[cls] = tuple(c for c in cls.__mro__[1:] if c is not object)
    return parents


class FilteredObject:
    """Instance-scoped filter façade with a property-bag constructor.

    ``config`` keys listed in ``_auto_config`` are copied onto ``_<key>``
    attributes by :meth:`_init`. A mapping form ``{"key": "merge"}`` merges
    the configured mapping over the attribute's existing value instead. Pass
    ``{"init": False}`` to skip :meth:`_init`.
    """

    _auto_config: ClassVar[Sequence[str] | Mapping[str, str]] = ()

    def __init__(self, config: Mapping[str, Any] | None = None) -> None:
        self._config: dict[str, Any] = {"init": True, **(config or {})}
        if self._config["init"]:
            self._init()

    def _init(self) -> None:
        auto = self._auto_config
        items = auto.items() if isinstance(auto, Mapping) else ((key, None) for key in auto)
        for key, flag in items:
            if key not in self._config:
                continue
            if flag == "merge":
                current = getattr(self, f"_{key}", None) or {}
                setattr(self, f"_{key}", {**current, **self._config[key]})
            else:
                setattr(self, f"_{key}", self._config[key])

    def _filter_store(self) -> FilterStore:
        store = self.__dict__.get("_method_filters")
        if store is None:
            store = self._method_filters = FilterStore()
        return store

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def apply_filter(
        self,
        method: str | Iterable[str] | Selector,
        interceptor: Interceptor | bool | None = None,
        *,
        name: str | None = None,
        at: int | None = None,
        before: str | None = None,
        after: str | None = None,
        apply_if_position_not_found: bool | None = None,
    ) -> Callable[[Interceptor], Interceptor] | None:
        """Apply a filter to one or more of this instance's methods.

        Args:
            method: Method name, iterable of names, or ``REMOVE_ALL`` to drop
                every filter of this instance.
            interceptor: The filter. ``False`` resets the method's filters.
                Omit it to use ``apply_filter`` as a decorator.
            name: Unique name; re-using a name overwrites that filter in place.
            at: Exact chain index.
            before: Insert in front of the filter with this name.
            after: Insert behind the filter with this name.
            apply_if_position_not_found: Still insert when the ``before`` or
                ``after`` anchor is missing. Defaults to the registry setting.

        Each of ``before``, ``after`` and ``at`` given performs its own
        insertion.
        """
        if interceptor is None and method is not REMOVE_ALL:

            def decorator(fn: Interceptor) -> Interceptor:
                self.apply_filter(
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

        registry = registry_for(type(self))
        if apply_if_position_not_found is None:
            apply_if_position_not_found = registry.settings.apply_if_position_not_found
        apply_to_store(
            self._filter_store(),
            method,
            interceptor,  # type: ignore[arg-type]
            name=name,
            at=at,
            before=before,
            after=after,
            apply_if_position_not_found=apply_if_position_not_found,
        )
        return None

    def get_filter(self, method: str, name: str) -> Interceptor | None:
        """The filter called *name* on *method*, or ``None``."""
        if not method or name is None:
            return None
        entry = self._filter_store().find(method, name)
        return entry.callback if entry is not None else None

    def get_filters(self, method: str) -> list[FilterEntry]:
        """All filters of *method* in chain order."""
        if not method:
            return []
        return self._filter_store().get(method)

    def remove_filter(self, method: str, name: str) -> bool:
        if not method or name is None:
            return False
        return self._filter_store().remove_by_name(method, name)

    def replace_filter(self, method: str, name: str, interceptor: Interceptor) -> bool:
        """Swap the callback of an existing named filter, keeping its position."""
        if not method or name is None:
            return False
        if not callable(interceptor):
            raise InvalidFilterException(
                f"Replacement filter '{name}' for '{method}' is not callable",
                code="FILTER_NOT_CALLABLE",
                context={"method": method, "name": name},
            )
        return self._filter_store().replace_by_name(method, name, interceptor)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run_filtered(
        self,
        method: str,
        params: dict[str, Any],
        callback: Base,
        filters: Iterable[FilterEntry | Interceptor] = (),
    ) -> Any:
        """Run *callback* as the body of *method*, wrapped in its filters.

        Args:
            method: Name of the filtered method.
            params: The method's arguments by name.
            callback: The method body, called as ``callback(self, params, chain)``;
                ``chain`` is ``None`` when no filter applies.
            filters: Extra filters for this call only, run after the stored ones.
        """
        return run_chain(
            self,
            params,
            callback,
            self._filter_store().get(method),
            filters,
            target=type(self).__qualname__,
            method=method,
            trace=registry_for(type(self)).settings.trace,
        )

    def invoke_method(self, method: str, params: Sequence[Any] = ()) -> Any:
        """Call *method* by name with positional *params*."""
        return getattr(self, method)(*params)

    @classmethod
    def _parents(cls) -> tuple[type, ...]:
        return parents_of(cls)

    def _stop(self, status: int = 0) -> None:
        """Exit the process; override to keep tests alive."""
        sys.exit(status)
