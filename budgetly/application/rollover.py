"""
Month rollover engine

On session start the user's stored current month is compared with the real
month. When the real month is ahead, the marker is advanced with a
compare-and-set on the previously stored value (only one session wins), and
the winner accrues one "mandatory" savings entry per active rule for the new
month.

Each accrual entry carries the idempotency key
"rollover:{user}:{month}:{rule}", so re-running the accrual for a month
(e.g. after a crash between the marker write and the appends) never
double-counts.

A user who was away for several months jumps straight to the real month:
the skipped months get no mandatory accrual. The result reports how many
months were skipped.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from budgetly.application.errors import NotAuthenticatedError
from budgetly.application.rules import get_active_rules
from budgetly.application.savings import AddSavingsUseCase
from budgetly.config import get_settings
from budgetly.domain.month import MonthKey
from budgetly.domain.savings import SAVINGS_SOURCE_MANDATORY, rollover_idempotency_key
from budgetly.domain.user import UserMarker
from budgetly.infrastructure.store import (
    LedgerStore,
    DuplicateRecordError,
    RecordNotFoundError,
    StoreUnavailableError,
    USERS,
)

logger = logging.getLogger(__name__)


class RolloverCheck(str, Enum):
    NEEDED = "needed"
    NOT_NEEDED = "not_needed"
    UNKNOWN = "unknown"  # marker missing or store unavailable


@dataclass(frozen=True)
class RolloverResult:
    user_id: str
    from_month: str | None
    to_month: str
    performed: bool
    entries_created: int = 0
    skipped_months: int = 0


def _parse_stored(value: str | None) -> MonthKey | None:
    try:
        return MonthKey.parse(value)
    except (TypeError, ValueError):
        return None


class MonthRolloverEngine:
    """
    Detects and executes the month transition of one user

    Args:
        store: Ledger store
        clock: Returns "now" (default: wall clock)
        tz: IANA timezone the month boundary is computed in (default: settings.TIMEZONE)
    """

    def __init__(
        self,
        store: LedgerStore,
        clock: Callable[[], datetime] | None = None,
        tz: str | None = None,
    ):
        self.store = store
        self.clock = clock
        self.tz = tz or get_settings().TIMEZONE
        self.add_savings = AddSavingsUseCase(store)

    def current_month(self) -> MonthKey:
        """Real current month, recomputed on every call"""
        return MonthKey.current(self.tz, self.clock() if self.clock else None)

    def get_marker(self, user_id: str) -> UserMarker | None:
        record = self.store.get(USERS, user_id)
        return UserMarker.from_record(record) if record else None

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    def check(self, user_id: str) -> RolloverCheck:
        """
        Compare the stored month with the real month

        Store failures and missing markers give UNKNOWN instead of raising.
        """
        try:
            marker = self.get_marker(user_id)
        except StoreUnavailableError:
            logger.warning("Rollover check for user %s skipped: ledger store unavailable", user_id)
            return RolloverCheck.UNKNOWN

        if marker is None:
            logger.warning("Rollover check for user %s skipped: no user marker", user_id)
            return RolloverCheck.UNKNOWN

        real = self.current_month()
        stored = _parse_stored(marker.current_month)
        if stored is None:
            logger.warning("User %s has malformed current_month %r", user_id, marker.current_month)
            return RolloverCheck.NEEDED
        if stored > real:
            # Months never move backwards (clock skew between devices)
            logger.warning("User %s current_month %s is ahead of real month %s", user_id, stored, real)
            return RolloverCheck.NOT_NEEDED
        return RolloverCheck.NEEDED if stored != real else RolloverCheck.NOT_NEEDED

    def needs_rollover(self, user_id: str) -> bool:
        """True only when the rollover is known to be due (soft-fails to False)"""
        return self.check(user_id) is RolloverCheck.NEEDED

    # ------------------------------------------------------------------
    # Transition
    # ------------------------------------------------------------------

    def perform_rollover(self, user_id: str) -> RolloverResult:
        """
        Advance the user to the real current month and accrue mandatory savings

        Safe to call when no rollover is due: the marker already holding
        the target month, or another session winning the compare-and-set,
        both return performed=False without touching the savings ledger.

        Raises:
            RecordNotFoundError: the user has no marker
            StoreUnavailableError: store I/O failed
        """
        target = self.current_month()
        marker = self.get_marker(user_id)
        if marker is None:
            raise RecordNotFoundError(USERS, user_id)

        stored_raw = marker.current_month
        if stored_raw == str(target):
            logger.info("User %s already on %s, rollover skipped", user_id, target)
            return RolloverResult(user_id, stored_raw, str(target), performed=False)

        stored = _parse_stored(stored_raw)
        if stored is not None and stored > target:
            logger.warning("Refusing to move user %s back from %s to %s", user_id, stored, target)
            return RolloverResult(user_id, stored_raw, str(target), performed=False)

        skipped = max(stored.months_until(target) - 1, 0) if stored is not None else 0

        # Marker first: a crash after this point leaves the month advanced
        won = self.store.conditional_update(
            USERS, user_id, {"current_month": stored_raw}, UserMarker.advance(target)
        )
        if not won:
            logger.info("User %s was rolled over to %s by another session", user_id, target)
            return RolloverResult(user_id, stored_raw, str(target), performed=False)

        if skipped:
            logger.warning(
                "User %s jumped %s -> %s: %d skipped month(s) %s..%s get no mandatory savings",
                user_id, stored_raw, target, skipped, stored.next(), target.previous(),
            )

        created = self.accrue_mandatory_savings(user_id, target)
        logger.info(
            "Month rollover completed for user %s: %s -> %s (%d savings entries)",
            user_id, stored_raw, target, created,
        )
        return RolloverResult(
            user_id, stored_raw, str(target),
            performed=True, entries_created=created, skipped_months=skipped,
        )

    def accrue_mandatory_savings(self, user_id: str, month: str | MonthKey) -> int:
        """
        Append one mandatory savings entry per active rule for the month

        Entries that already exist (same idempotency key) are skipped, so
        this can be re-run to finish an interrupted rollover.

        Returns:
            Number of entries created by this call
        """
        month_key = MonthKey.parse(month)
        created = 0
        for rule in get_active_rules(self.store, user_id):
            key = rollover_idempotency_key(user_id, month_key, rule.id)
            try:
                self.add_savings.execute(
                    user_id, month_key, rule.amount, SAVINGS_SOURCE_MANDATORY, idempotency_key=key
                )
            except DuplicateRecordError:
                logger.debug("Mandatory savings %s already recorded", key)
                continue
            created += 1
        return created

    # ------------------------------------------------------------------
    # Onboarding / session
    # ------------------------------------------------------------------

    def initialize_user(self, user_id: str, email: str) -> bool:
        """
        Seed the user marker with the real current month (signup)

        Returns:
            False if the user was already initialized (marker left untouched)
        """
        month = self.current_month()
        try:
            self.store.create(USERS, UserMarker.create(user_id, email, month))
        except DuplicateRecordError:
            logger.info("User %s already initialized", user_id)
            return False
        logger.info("Initialized user %s on %s", user_id, month)
        return True

    def start_session(self, user_id: str | None) -> RolloverResult | None:
        """
        Session-start hook: roll over when due

        Returns:
            RolloverResult if a rollover was attempted, else None
        """
        if not user_id:
            raise NotAuthenticatedError("Not authenticated")
        if not self.needs_rollover(user_id):
            return None
        return self.perform_rollover(user_id)
