# graphstore - temporal storage for subgraph dynamic data sources
# Copyright (C) 2026 The graphstore Authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
"""Contains helper aliases and functions for various attrs validators that can be passed to the `validator=` arg of
any attr field. For example:

@attr.s
class MyClass:
  param: Optional[bytes] = attr.ib(validator=is_opt_bytes)
  is_offchain: bool = attr.ib(validator=is_bool)
"""

from typing import Any, Callable, Optional, Type

import attr

# Postgres `integer` columns are signed 32-bit
MAX_POSTGRES_INTEGER = 2**31 - 1

JSON_DOCUMENT_TYPES = (dict, list, str, int, float, bool)


class IsOptionalValidator:
    def __init__(self, expected_cls_type: Type) -> None:
        self._expected_cls_type = expected_cls_type

    def __call__(self, instance: Any, attribute: attr.Attribute, value: Any) -> None:
        return attr.validators.optional(
            attr.validators.instance_of(self._expected_cls_type)
        )(instance, attribute, value)


def is_opt(cls_type: Type) -> Callable:
    """Returns an attrs validator that checks if the value is an instance of |cls_type|
    or None."""
    return IsOptionalValidator(cls_type)


def is_opt_int(_instance: Any, attribute: attr.Attribute, value: Optional[int]) -> None:
    """Checks that the value is None or an int. Bools are rejected even though
    bool is a subclass of int."""
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValueError(
            f"Expected optional int value for field [{attribute.name}], found "
            f"{type(value)}."
        )


def is_postgres_non_negative_int(
    _instance: Any, attribute: attr.Attribute, value: int
) -> None:
    """Checks that the value is an int (not a bool) that fits in a non-negative
    Postgres integer column."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(
            f"Expected int value for field [{attribute.name}], found {type(value)}."
        )
    if not 0 <= value <= MAX_POSTGRES_INTEGER:
        raise ValueError(
            f"Value {value} for field [{attribute.name}] is outside of the range "
            f"[0, {MAX_POSTGRES_INTEGER}]."
        )


def is_opt_json_document(
    _instance: Any, attribute: attr.Attribute, value: Any
) -> None:
    if value is not None and not isinstance(value, JSON_DOCUMENT_TYPES):
        raise ValueError(
            f"Expected JSON document for field [{attribute.name}], found {type(value)}."
        )


# String field validators
is_str = attr.validators.instance_of(str)

# Boolean field validators
is_bool = attr.validators.instance_of(bool)

# Bytes field validators
is_opt_bytes = is_opt(bytes)
