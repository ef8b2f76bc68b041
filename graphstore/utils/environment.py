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

"""Tools for determining which environment we are running in.

The environment is selected with the GRAPHSTORE_ENV environment variable, which
should only be set on deployed instances. When it is unset we assume we are
running on a local development machine or in tests.
"""
import logging
import os
import sys
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

import graphstore

GRAPHSTORE_ENV = "GRAPHSTORE_ENV"


class DeployedEnvironment(Enum):
    STAGING = "staging"
    PRODUCTION = "production"


DEPLOYED_ENVIRONMENTS = {env.value for env in DeployedEnvironment}


def get_deployed_environment() -> Optional[str]:
    """Get the environment we are running in

    Returns:
        The deployed environment we are running in, or None if it is not set
    """
    return os.getenv(GRAPHSTORE_ENV)


def in_deployed_environment() -> bool:
    """Check whether we're currently running on a local dev machine or deployed

    Returns:
        True if on a deployed instance
        False if not
    """
    return get_deployed_environment() in DEPLOYED_ENVIRONMENTS


def in_production() -> bool:
    return (
        in_deployed_environment()
        and get_deployed_environment() == DeployedEnvironment.PRODUCTION.value
    )


def local_only(func: Callable) -> Callable:
    """Decorator function to verify a function only runs locally

    If running on a deployed instance, raises before any work can be done.
    """

    @wraps(func)
    def check_env(*args: Any, **kwargs: Any) -> Any:
        if in_deployed_environment():
            logging.error("This function is not allowed in a deployed environment.")
            raise RuntimeError("Not available, see service logs.")

        return func(*args, **kwargs)

    return check_env


def in_test() -> bool:
    """Check whether we are running in a test"""
    # Pytest sets graphstore.called_from_test in conftest.py
    if not hasattr(graphstore, "called_from_test"):
        # Outside pytest, assume we are in a test if unittest has been imported
        setattr(graphstore, "called_from_test", "unittest" in sys.modules)
    return getattr(graphstore, "called_from_test")
