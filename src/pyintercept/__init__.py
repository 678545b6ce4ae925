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
"""pyintercept — named, ordered interceptor chains around methods.

A class marks methods as filterable; other code applies filters around them
without modifying or subclassing the class::

    from pyintercept import FilteredObject, filterable

    class Greeter(FilteredObject):
        @filterable
        def greet(self, name):
            return f"hello {name}"

    greeter = Greeter()
    greeter.apply_filter("greet", lambda self, params, chain: chain.next(self, params, chain).upper())
    greeter.greet("ada")  # "HELLO ADA"
"""

from pyintercept.core.bootstrap import configure
from pyintercept.core.config import Config
from pyintercept.core.object import FilteredObject
from pyintercept.core.static_object import FilteredClass
from pyintercept.filters import (
    REMOVE_ALL,
    FilterChain,
    FilterEntry,
    FilterRegistry,
    apply_lazy,
    filterable,
    get_default_registry,
    has_deferred,
)

__all__ = [
    "REMOVE_ALL",
    "Config",
    "FilterChain",
    "FilterEntry",
    "FilterRegistry",
    "FilteredClass",
    "FilteredObject",
    "apply_lazy",
    "configure",
    "filterable",
    "get_default_registry",
    "has_deferred",
]
