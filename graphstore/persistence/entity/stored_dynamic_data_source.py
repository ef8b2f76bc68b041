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
"""The value representation of a dynamic data source, as exchanged with callers
of the dynamic data source store."""
from typing import Any, Optional

import attr

from graphstore.common import attr_validators

# Block numbers are stored in Postgres `integer` columns and ranges
BlockNumber = int

# The causality region of every onchain data source
ONCHAIN_CAUSALITY_REGION = 0


@attr.s(frozen=True)
class StoredDynamicDataSource:
    """A data source that was created dynamically while processing a block.

    Offchain data sources (e.g. created from file contents) each live in their
    own causality region, onchain data sources share causality region 0. The
    store only tracks whether a data source is offchain; the region itself is
    assigned by the database.
    """

    # Index of the data source template in the subgraph manifest
    manifest_idx: int = attr.ib(
        validator=attr_validators.is_postgres_non_negative_int
    )

    # Constructor parameter, e.g. a contract address. Opaque to the store.
    param: Optional[bytes] = attr.ib(
        default=None, validator=attr_validators.is_opt_bytes
    )

    # Arbitrary JSON context. Opaque to the store.
    context: Optional[Any] = attr.ib(
        default=None, validator=attr_validators.is_opt_json_document
    )

    # Block the data source was created at. Only None before insertion.
    creation_block: Optional[BlockNumber] = attr.ib(
        default=None, validator=attr_validators.is_opt_int
    )

    is_offchain: bool = attr.ib(default=False, validator=attr_validators.is_bool)
