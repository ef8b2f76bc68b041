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
"""Script for printing the DDL that creates the dynamic data sources table of a
deployment namespace.

Usage:
    python -m graphstore.tools.print_data_sources_ddl --namespace sgd42
"""
import argparse
import logging
from typing import List, Optional

from graphstore.persistence.database.dynds.data_sources_table import (
    DataSourcesTable,
)
from graphstore.persistence.database.namespace import Namespace


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--namespace",
        required=True,
        help="The deployment namespace, e.g. sgd42.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> str:
    """Executes the main flow of the script and returns the printed DDL."""
    args = create_parser().parse_args(argv)
    table = DataSourcesTable(Namespace(args.namespace))
    logging.info("Generating DDL for [%s]", table.qname)
    ddl = table.as_ddl()
    print(ddl)
    return ddl


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    main()
