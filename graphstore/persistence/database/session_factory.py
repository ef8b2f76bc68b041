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
"""
Class for generating SQLAlchemy Sessions for the subgraph store database.
"""
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from graphstore.persistence.database.sqlalchemy_engine_manager import (
    SQLAlchemyEngineManager,
)


class SessionFactory:
    """Creates SQLAlchemy sessions bound to the store's engine"""

    @classmethod
    @contextmanager
    def using_database(cls, *, autocommit: bool = True) -> Iterator[Session]:
        """Yields a session whose statements run in a single transaction. The
        transaction is committed on exit if |autocommit| is set and rolled back
        if the block raises."""
        session = None
        try:
            session = cls._for_database()
            yield session
            if autocommit:
                session.commit()
        except Exception as e:
            if session:
                session.rollback()
            raise e
        finally:
            if session:
                session.close()

    @classmethod
    def _for_database(cls) -> Session:
        engine = SQLAlchemyEngineManager.get_engine()
        if engine is None:
            raise ValueError("No engine set, call SQLAlchemyEngineManager.init_engine")

        return Session(bind=engine)
