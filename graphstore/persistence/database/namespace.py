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
"""Defines the Postgres schema namespace that holds the tables of a single
subgraph deployment."""
import re
from typing import Any

import attr

from graphstore.common import attr_validators

# Deployment namespaces are always `sgd` followed by the deployment's numeric id
_NAMESPACE_REGEX = re.compile(r"sgd[0-9]+")


def _is_valid_namespace(_instance: Any, _attribute: attr.Attribute, value: str) -> None:
    if not _NAMESPACE_REGEX.fullmatch(value):
        raise ValueError(
            f"Invalid namespace [{value}]: expected `sgd` followed by digits."
        )


@attr.s(frozen=True)
class Namespace:
    """The name of the Postgres schema for a subgraph deployment. The name is
    interpolated into SQL, so it is validated on construction."""

    name: str = attr.ib(validator=[attr_validators.is_str, _is_valid_namespace])

    def __str__(self) -> str:
        return self.name
