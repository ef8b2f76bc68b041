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
"""A class to manage the SQLAlchemy Engine for the subgraph store database."""
import logging
import os
from typing import Any, Optional

import sqlalchemy
from sqlalchemy.engine import URL, Engine

from graphstore.persistence.database.constants import (
    DEFAULT_DB_PORT,
    SQLALCHEMY_DB_HOST,
    SQLALCHEMY_DB_NAME,
    SQLALCHEMY_DB_PASSWORD,
    SQLALCHEMY_DB_PORT,
    SQLALCHEMY_DB_USER,
)


class SQLAlchemyEngineManager:
    """Creates and caches the single synchronous SQLAlchemy Engine used by the
    store."""

    _engine: Optional[Engine] = None

    @classmethod
    def init_engine(cls, db_url: Optional[URL] = None, **kwargs: Any) -> Engine:
        """Initializes a sqlalchemy Engine object for |db_url|, or for the URL
        built from the SQLALCHEMY_* environment variables, and caches it for
        future use."""
        if cls._engine is not None:
            raise ValueError("Already initialized database engine")

        if db_url is None:
            db_url = cls.postgres_db_url_from_env_vars()

        try:
            engine = sqlalchemy.create_engine(db_url, pool_pre_ping=True, **kwargs)
        except BaseException as e:
            logging.error(
                "Unable to create engine for postgres instance [%s]: %s",
                db_url.render_as_string(hide_password=True),
                str(e),
            )
            raise e

        cls._engine = engine
        return engine

    @classmethod
    def get_engine(cls) -> Optional[Engine]:
        return cls._engine

    @classmethod
    def teardown_engine(cls) -> None:
        if cls._engine is not None:
            cls._engine.dispose()
            cls._engine = None

    @classmethod
    def postgres_db_url_from_env_vars(cls) -> URL:
        """Builds the database URL from the SQLALCHEMY_* environment variables.
        Raises if the database name or host is missing."""
        db_name = os.getenv(SQLALCHEMY_DB_NAME)
        host = os.getenv(SQLALCHEMY_DB_HOST)
        if not db_name or not host:
            raise ValueError(
                f"Both [{SQLALCHEMY_DB_NAME}] and [{SQLALCHEMY_DB_HOST}] must be set"
            )

        return URL.create(
            drivername="postgresql",
            username=os.getenv(SQLALCHEMY_DB_USER),
            password=os.getenv(SQLALCHEMY_DB_PASSWORD),
            host=host,
            port=int(os.getenv(SQLALCHEMY_DB_PORT, str(DEFAULT_DB_PORT))),
            database=db_name,
        )
