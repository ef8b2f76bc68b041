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
"""The table that stores the data sources a subgraph creates dynamically while
it processes blocks.

Every row carries a `block_range` of the form [creation_block, +inf) while it
is live. Reverting a block deletes the rows created at exactly that block, and
removing an offchain data source sets its range to the empty range. All
containment queries use `@>` so that they can be answered from the GiST index
on `block_range`.
"""
import logging
from typing import Any, List, Sequence

import sqlalchemy
from sqlalchemy import Column, Integer, LargeBinary, MetaData, Table
from sqlalchemy.dialects.postgresql import INT4RANGE, JSONB
from sqlalchemy.orm import Session

from graphstore.persistence.database.namespace import Namespace
from graphstore.persistence.entity.stored_dynamic_data_source import (
    ONCHAIN_CAUSALITY_REGION,
    BlockNumber,
    StoredDynamicDataSource,
)
from graphstore.persistence.errors import ConstraintViolationError
from graphstore.utils import environment

VID = "vid"
BLOCK_RANGE = "block_range"
CAUSALITY_REGION = "causality_region"
MANIFEST_IDX = "manifest_idx"
PARENT = "parent"
ID = "id"
PARAM = "param"
CONTEXT = "context"

# An absent context must be stored as SQL NULL rather than the JSON literal
# `null` so that `is not distinct from` matches it in `remove_offchain`.
_CONTEXT_TYPE = JSONB(none_as_null=True)


class DataSourcesTable:
    """Reads and writes the dynamic data sources of the deployment whose tables
    live in |namespace|. All methods run their statements on the session they
    are given and never commit; the caller owns the transaction."""

    TABLE_NAME = "data_sources$"

    def __init__(self, namespace: Namespace) -> None:
        self.namespace = namespace
        self.qname = f"{namespace}.{self.TABLE_NAME}"
        self.table = Table(
            self.TABLE_NAME,
            MetaData(),
            Column(VID, Integer, primary_key=True),
            Column(BLOCK_RANGE, INT4RANGE, nullable=False),
            Column(CAUSALITY_REGION, Integer),
            Column(MANIFEST_IDX, Integer, nullable=False),
            Column(PARENT, Integer),
            Column(ID, LargeBinary),
            Column(PARAM, LargeBinary),
            Column(CONTEXT, _CONTEXT_TYPE),
            schema=namespace.name,
        )

    @property
    def vid(self) -> Column:
        return self.table.c[VID]

    @property
    def block_range(self) -> Column:
        return self.table.c[BLOCK_RANGE]

    @property
    def causality_region(self) -> Column:
        return self.table.c[CAUSALITY_REGION]

    @property
    def manifest_idx(self) -> Column:
        return self.table.c[MANIFEST_IDX]

    @property
    def param(self) -> Column:
        return self.table.c[PARAM]

    @property
    def context(self) -> Column:
        return self.table.c[CONTEXT]

    def as_ddl(self) -> str:
        return f"""
            create table {self.qname} (
                vid integer generated by default as identity primary key,
                block_range int4range not null,
                causality_region integer generated by default as identity,
                manifest_idx integer not null,
                parent integer references {self.qname},
                id bytea,
                param bytea,
                context jsonb
            );

            create index gist_block_range_data_sources$ on {self.qname} using gist (block_range);
            """

    def load(
        self, session: Session, block: BlockNumber
    ) -> List[StoredDynamicDataSource]:
        """Returns the data sources that are live at |block|.

        The result is ordered by `(creation_block, vid)`, i.e. in insertion
        order. Reverts and the execution order of triggers depend on data
        sources being processed in the order in which they were created.
        """
        query = (
            sqlalchemy.select(
                self.block_range,
                self.manifest_idx,
                self.param,
                self.context,
                self.causality_region,
            )
            .where(self._contains_block(block))
            .order_by(self.vid)
        )
        rows = session.execute(query).all()

        data_sources = [
            StoredDynamicDataSource(
                manifest_idx=manifest_idx,
                param=bytes(param) if param is not None else None,
                context=context,
                creation_block=_creation_block(block_range),
                is_offchain=causality_region > ONCHAIN_CAUSALITY_REGION,
            )
            for block_range, manifest_idx, param, context, causality_region in rows
        ]

        # The sort is stable and rows are ordered by vid, so the result is
        # ordered by (creation_block, vid).
        data_sources.sort(key=lambda ds: ds.creation_block)

        return data_sources

    def insert(
        self,
        session: Session,
        data_sources: Sequence[StoredDynamicDataSource],
        block: BlockNumber,
    ) -> int:
        """Inserts |data_sources|, all of which must have been created at
        |block|, and returns the number of rows inserted."""
        onchain_query = sqlalchemy.text(
            f"insert into {self.qname}"
            "(block_range, manifest_idx, param, context, causality_region) "
            "values (int4range(:block, null), :manifest_idx, :param, :context, "
            ":causality_region)"
        ).bindparams(
            sqlalchemy.bindparam("block", type_=Integer), *self._payload_bindparams()
        )

        # Offchain data sources get a unique causality region from the
        # identity sequence of the column.
        offchain_query = sqlalchemy.text(
            f"insert into {self.qname}"
            "(block_range, manifest_idx, param, context) "
            "values (int4range(:block, null), :manifest_idx, :param, :context)"
        ).bindparams(
            sqlalchemy.bindparam("block", type_=Integer), *self._payload_bindparams()
        )

        inserted_total = 0
        for ds in data_sources:
            if ds.creation_block != block:
                raise ConstraintViolationError(
                    f"mismatching creation blocks `{ds.creation_block}` and `{block}`"
                )

            params: dict = {
                "block": block,
                "manifest_idx": ds.manifest_idx,
                "param": ds.param,
                "context": ds.context,
            }
            if ds.is_offchain:
                result = session.execute(offchain_query, params)
            else:
                params["causality_region"] = ONCHAIN_CAUSALITY_REGION
                result = session.execute(onchain_query, params)
            inserted_total += result.rowcount

        logging.info(
            "Inserted [%s] dynamic data sources into [%s] at block [%s]",
            inserted_total,
            self.qname,
            block,
        )
        return inserted_total

    def revert(self, session: Session, block: BlockNumber) -> None:
        # Use `@>` to leverage the gist index.
        # This assumes all ranges are of the form [x, +inf).
        query = sqlalchemy.text(
            f"delete from {self.qname} "
            "where block_range @> :block and lower(block_range) = :block"
        ).bindparams(sqlalchemy.bindparam("block", type_=Integer))
        result = session.execute(query, {"block": block})
        logging.info(
            "Reverted [%s] dynamic data sources in [%s] created at block [%s]",
            result.rowcount,
            self.qname,
            block,
        )

    def copy_to(
        self, session: Session, dst: "DataSourcesTable", target_block: BlockNumber
    ) -> int:
        """Copy the dynamic data sources from this table to |dst|. All data
        sources that were created up to and including |target_block| are
        copied. Data sources that are still live, or that were closed after
        |target_block|, are copied as live.

        If |dst| already has any data sources we assume they were copied by an
        earlier call and return their count without copying anything.
        """
        count = session.execute(
            sqlalchemy.select(sqlalchemy.func.count()).select_from(dst.table)
        ).scalar_one()
        if count > 0:
            logging.info(
                "Found [%s] data sources in [%s], skipping copy from [%s]",
                count,
                dst.qname,
                self.qname,
            )
            return count

        # Keep the vid so that `parent` references and the insertion order
        # survive the copy.
        query = sqlalchemy.text(
            f"""
            insert into {dst.qname}(vid, block_range, causality_region, manifest_idx, parent, id, param, context)
            select e.vid,
                   case
                     when upper(e.block_range) <= :target_block then e.block_range
                     else int4range(lower(e.block_range), null)
                   end,
                   e.causality_region, e.manifest_idx, e.parent, e.id, e.param, e.context
              from {self.qname} e
             where lower(e.block_range) <= :target_block
             order by e.vid
            """
        ).bindparams(sqlalchemy.bindparam("target_block", type_=Integer))
        copied = session.execute(query, {"target_block": target_block}).rowcount

        # Explicitly copied values do not advance the identity sequences
        for column in (VID, CAUSALITY_REGION):
            session.execute(
                sqlalchemy.text(
                    f"select setval(pg_get_serial_sequence(:qname, :column), "
                    f"coalesce(max({column}), 0) + 1, false) from {dst.qname}"
                ),
                {"qname": dst.qname, "column": column},
            )

        logging.info(
            "Copied [%s] data sources from [%s] to [%s] up to block [%s]",
            copied,
            self.qname,
            dst.qname,
            target_block,
        )

        if not environment.in_production():
            self._check_copy(session, dst, target_block)

        return copied

    def _check_copy(
        self, session: Session, dst: "DataSourcesTable", target_block: BlockNumber
    ) -> None:
        expected = self.load(session, target_block)
        actual = dst.load(session, target_block)
        if expected != actual:
            raise ConstraintViolationError(
                f"data sources live at block {target_block} differ after copying "
                f"[{self.qname}] to [{dst.qname}]: expected {expected}, found {actual}"
            )

    def remove_offchain(
        self, session: Session, data_sources: Sequence[StoredDynamicDataSource]
    ) -> None:
        """Removes offchain data sources by matching on their values rather than
        their identity. The block range of a removed data source is set to the
        empty range, so it is no longer visible at any block."""
        query = sqlalchemy.text(
            f"update {self.qname} set block_range = 'empty'::int4range "
            "where manifest_idx = :manifest_idx "
            "and param is not distinct from :param "
            "and context is not distinct from :context "
            "and lower(block_range) is not distinct from :creation_block"
        ).bindparams(
            *self._payload_bindparams(),
            sqlalchemy.bindparam("creation_block", type_=Integer),
        )

        removed_total = 0
        for ds in data_sources:
            if not ds.is_offchain:
                raise ConstraintViolationError(
                    "called remove_offchain with onchain data sources"
                )

            count = session.execute(
                query,
                {
                    "manifest_idx": ds.manifest_idx,
                    "param": ds.param,
                    "context": ds.context,
                    "creation_block": ds.creation_block,
                },
            ).rowcount

            # Data source deduplication upstream guarantees at most one match
            if count > 1:
                raise ConstraintViolationError(
                    f"expected to remove at most one offchain data source but "
                    f"would remove {count}, ds: {ds}"
                )
            removed_total += count

        logging.debug(
            "Removed [%s] offchain data sources from [%s]",
            removed_total,
            self.qname,
        )

    def _contains_block(self, block: BlockNumber) -> Any:
        return self.block_range.op("@>")(
            sqlalchemy.bindparam("block", block, type_=Integer)
        )

    @staticmethod
    def _payload_bindparams() -> List[sqlalchemy.sql.elements.BindParameter]:
        return [
            sqlalchemy.bindparam("manifest_idx", type_=Integer),
            sqlalchemy.bindparam("param", type_=LargeBinary),
            sqlalchemy.bindparam("context", type_=_CONTEXT_TYPE),
        ]


def _creation_block(block_range: Any) -> BlockNumber:
    """Returns the inclusive lower bound of |block_range|, which is the block
    the data source was created at."""
    if block_range.lower is None or not block_range.lower_inc:
        raise ConstraintViolationError(
            f"dynamic data source with open creation block: {block_range}"
        )
    return block_range.lower
