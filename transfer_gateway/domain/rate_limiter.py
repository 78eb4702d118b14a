"""Per-user sliding window limit on transfer attempts"""

import logging
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from transfer_gateway.domain.models import RateLimitDecision
from transfer_gateway.domain.exceptions import PersistenceFailure
from transfer_gateway.infrastructure.database.repositories import RateLimitRepository
from transfer_gateway.utils.date_utils import utcnow, window_start

MAX_ATTEMPTS = 10
WINDOW_DURATION_SECONDS = 3600


class RateLimiter:
    """Counts transfer attempts per user inside a trailing window"""

    def __init__(
        self,
        db: Session,
        max_attempts: int = MAX_ATTEMPTS,
        window_seconds: int = WINDOW_DURATION_SECONDS,
    ):
        self.db = db
        self.repository = RateLimitRepository(db)
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds

    def check_and_record_attempt(self, user_id: str, now: datetime | None = None) -> RateLimitDecision:
        """
        Record one transfer attempt and decide whether it may proceed.

        Rejected attempts are counted as well, so a caller hammering the
        endpoint keeps the window saturated until it rolls over.

        Raises:
            PersistenceFailure: If the window cannot be read or written
        """
        now = now or utcnow()
        since = window_start(now, self.window_seconds)

        try:
            attempt_count = self.repository.record_attempt(user_id, now, since)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logging.error(f"Rate limit check failed: {e}", extra={"user_id": user_id})
            raise PersistenceFailure("Rate limit check failed") from e

        return RateLimitDecision(
            allowed=attempt_count <= self.max_attempts,
            attempt_count=attempt_count,
        )
