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
"""@filterable — routes a method's body through its owner's filter chain."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar, overload

from pyintercept.filters.chain import FilterChain
from pyintercept.kernel.exceptions import InvalidFilterException

F = TypeVar("F", bound=Callable[..., Any])

_OPERATION_ATTR = "__pyintercept_operation__"


@overload
def filterable(fn: F) -> F: ...


@overload
def filterable(fn: str | None = None, *, name: str | None = None) -> Callable[[F], F]: ...


def filterable(fn: Any = None, *, name: str | None = None) -> Any:
    """Make a method interceptable.

    The call's arguments are bound into a ``params`` dict (defaults applied,
    the ``self``/``cls`` argument excluded) and handed to the owner's
    ``run_filtered``. The original function runs as the last link of the
    chain, re-invoked with whatever ``params`` the filters passed down.

    Usage::

        class Mailer(FilteredObject):
            @filterable
            def send(self, to, subject="(none)"):
                ...

        class Rates(FilteredClass):
            @classmethod
            @filterable("lookup")
            def get_rate(cls, currency):
                ...
    """
    if isinstance(fn, str):
        return filterable(name=fn)
    if fn is None:
        return lambda f: _make_filterable(f, name or f.__name__)
    return _make_filterable(fn, name or fn.__name__)


def _make_filterable(fn: F, operation: str) -> F:
    sig = inspect.signature(fn)
    parameters = list(sig.parameters)
    if not parameters:
        raise InvalidFilterException(
            f"@filterable needs a method taking self or cls: {fn.__qualname__}",
            code="FILTERABLE_NO_SUBJECT",
        )
    subject_name = parameters[0]

    def base(subject: Any, params: dict[str, Any], chain: FilterChain | None) -> Any:
        bound = sig.bind_partial()
        bound.arguments.update({subject_name: subject, **params})
        return fn(*bound.args, **bound.kwargs)

    @functools.wraps(fn)
    def wrapper(subject: Any, *args: Any, **kwargs: Any) -> Any:
        runner = getattr(subject, "run_filtered", None)
        if runner is None:
            raise InvalidFilterException(
                f"{type(subject).__name__} cannot run filters for '{operation}'",
                code="FILTERABLE_NO_RUNNER",
                context={"method": operation},
            )
        bound = sig.bind(subject, *args, **kwargs)
        bound.apply_defaults()
        params = {k: v for k, v in bound.arguments.items() if k != subject_name}
        return runner(operation, params, base)

    setattr(wrapper, _OPERATION_ATTR, operation)
    return wrapper  # type: ignore[return-value]


def filterable_operations(cls: type) -> list[str]:
    """Operation names of every ``@filterable`` method on *cls* (inherited included)."""
    operations: list[str] = []
    for attr in dir(cls):
        member = inspect.getattr_static(cls, attr, None)
        if isinstance(member, (classmethod, staticmethod)):
            member = member.__func__
        operation = getattr(member, _OPERATION_ATTR, None)
        if operation is not None and operation not in operations:
            operations.append(operation)
    return operations
