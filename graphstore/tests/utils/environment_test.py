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
"""Tests for environment.py."""
from unittest import TestCase
from unittest.mock import patch

from graphstore.utils import environment


class EnvironmentTest(TestCase):
    """Tests for environment.py"""

    @patch.dict("os.environ", {}, clear=True)
    def test_local(self) -> None:
        self.assertFalse(environment.in_deployed_environment())
        self.assertFalse(environment.in_production())

    @patch.dict("os.environ", {"GRAPHSTORE_ENV": "production"})
    def test_production(self) -> None:
        self.assertTrue(environment.in_deployed_environment())
        self.assertTrue(environment.in_production())

    @patch.dict("os.environ", {"GRAPHSTORE_ENV": "staging"})
    def test_staging(self) -> None:
        self.assertTrue(environment.in_deployed_environment())
        self.assertFalse(environment.in_production())

    @patch.dict("os.environ", {"GRAPHSTORE_ENV": "unknown"})
    def test_unknown_environment_is_local(self) -> None:
        self.assertFalse(environment.in_deployed_environment())

    def test_local_only(self) -> None:
        @environment.local_only
        def fn() -> int:
            return 1

        with patch.dict("os.environ", {}, clear=True):
            self.assertEqual(1, fn())

        with patch.dict("os.environ", {"GRAPHSTORE_ENV": "staging"}):
            with self.assertRaises(RuntimeError):
                fn()

    def test_in_test(self) -> None:
        self.assertTrue(environment.in_test())

    @patch("graphstore.called_from_test", False, create=True)
    def test_not_in_test(self) -> None:
        self.assertFalse(environment.in_test())
