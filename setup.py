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
"""Packaging for the graphstore dynamic data source store.

The REQUIRED_PACKAGES are the external packages the store imports at runtime.
TEST_PACKAGES are only needed to run the tests.
"""
import setuptools

REQUIRED_PACKAGES = [
    "attrs",
    # Range and identity column support in the postgres dialect
    "SQLAlchemy>=2.0",
    "psycopg2-binary",
]

TEST_PACKAGES = [
    "pytest",
]

setuptools.setup(
    name="graphstore",
    version="0.1.0",
    python_requires=">=3.9",
    install_requires=REQUIRED_PACKAGES,
    extras_require={"test": TEST_PACKAGES},
    packages=setuptools.find_packages(include=["graphstore", "graphstore.*"]),
)
