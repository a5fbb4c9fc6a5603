"""
Service Base
Storage handle and clock wiring shared by every service
"""

import logging
from typing import Callable, Optional, TypeVar
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from database import SessionLocal
from services.exceptions import StorageUnavailableError


logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


class BaseService:
    """
    Services receive their storage handle (a session factory) and clock at
    construction. Every public method also accepts an optional session so a
    caller can run several operations in one unit of work.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        clock: Optional[Clock] = None
    ):
        self.session_factory = session_factory or SessionLocal
        self.clock = clock or datetime.utcnow

    def _run(self, work: Callable[[Session], T], db: Optional[Session] = None) -> T:
        """
        Run `work` on the caller's session or on a fresh one.
        Storage failures are rolled back and surfaced as StorageUnavailableError.
        """
        session = db
        try:
            if session is None:
                session = self.session_factory()
            return work(session)
        except SQLAlchemyError as e:
            logger.error(f"{type(self).__name__}: storage failure: {e}")
            if session is not None:
                session.rollback()
            raise StorageUnavailableError(f"Schedule store unavailable: {e}") from e
        finally:
            if db is None and session is not None:
                session.close()
