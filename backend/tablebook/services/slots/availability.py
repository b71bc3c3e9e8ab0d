# backend/tablebook/services/slots/availability.py
"""
Availability query.

Answers "which slots, with how much capacity left, can branch B offer on
date D for a party of P" by combining:
- the day grid (settings + override, cached in Redis when available)
- the capacity ledger (active bookings, always read live)
- the wall clock passed in by the caller (today bound, late-night rollover)
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time as dt_time, timedelta
from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from ...errors import InvalidFormat, SettingsNotFound
from .calculator import DayGrid, get_branch_settings, load_day_grid
from .config import BookingConfig, get_booking_config
from .invalidator import get_affected_dates
from .ledger import Usage, day_usage, remaining_from_usage
from .ranker import rank_closest
from .redis_store import SlotsRedisStore
from .timeutils import format_display_time, format_time, minute_of_day, round_up_to_interval

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotAvailability:
    time: int
    remaining_seats: int
    remaining_tables: int
    is_available: bool

    @property
    def time_str(self) -> str:
        return format_time(self.time)

    @property
    def display_time(self) -> str:
        return format_display_time(self.time)


@dataclass
class AvailabilityResult:
    branch_id: int
    requested_date: date
    date: date
    party_size: int
    slots: list[SlotAvailability] = field(default_factory=list)
    closed: bool = False
    reason: str | None = None
    note: str | None = None
    rolled_over: bool = False
    requested_time: int | None = None
    requested_time_available: bool | None = None
    closest: list[SlotAvailability] = field(default_factory=list)

    @property
    def has_availability(self) -> bool:
        return any(slot.is_available for slot in self.slots)


@dataclass(frozen=True)
class CalendarDay:
    date: date
    closed: bool
    open_slots_count: int

    @property
    def has_availability(self) -> bool:
        return self.open_slots_count > 0


def effective_request_date(
    target_date: date,
    now: datetime,
    config: BookingConfig,
) -> tuple[date, bool]:
    """
    Date whose slots should be offered for a request about target_date.

    A request for "today" made in the late-night band is served with
    tomorrow's slots from its normal opening.

    Returns:
        (effective_date, rolled_over)
    """
    if target_date == now.date() and config.is_late_night(now):
        return now.date() + timedelta(days=1), True
    return target_date, False


def get_availability(
    db: Session,
    branch_id: int,
    target_date: date,
    party_size: int,
    now: datetime,
    requested_time: int | None = None,
    redis: Redis | None = None,
    config: BookingConfig | None = None,
    rollover: bool = True,
) -> AvailabilityResult:
    """
    Available slots of a branch on a date for a party size.

    Raises:
        SettingsNotFound: the branch has no booking configuration
        InvalidFormat: party_size is not positive
    """
    config = config or get_booking_config()
    if party_size < 1:
        raise InvalidFormat("party_size must be a positive integer")

    # Step 1: Settings
    settings = get_branch_settings(db, branch_id)
    if settings is None:
        raise SettingsNotFound(branch_id=branch_id)

    # Step 2: Late-night rollover
    if rollover:
        effective_date, rolled_over = effective_request_date(target_date, now, config)
    else:
        effective_date, rolled_over = target_date, False

    result = AvailabilityResult(
        branch_id=branch_id,
        requested_date=target_date,
        date=effective_date,
        party_size=party_size,
        rolled_over=rolled_over,
        requested_time=requested_time,
    )

    # Step 3: Day grid (override applied)
    grid = _get_day_grid(db, branch_id, effective_date, config, redis)
    result.note = grid.window.note
    if grid.closed:
        result.closed = True
        result.reason = grid.window.reason
        if requested_time is not None:
            result.requested_time_available = False
        return result

    # Step 4: Today bound
    candidates = list(grid.slots)
    if effective_date == now.date():
        bound = round_up_to_interval(
            minute_of_day(now, ceil=True),
            grid.window.interval_minutes,
            anchor=grid.window.open_time,
        )
        candidates = [slot for slot in candidates if slot.time >= bound]

    # Step 5: Remaining capacity
    usage = day_usage(db, branch_id, effective_date) if candidates else {}
    day_start = datetime.combine(effective_date, dt_time.min)
    for slot in candidates:
        # Step 6: never offer a slot that already started
        if day_start + timedelta(minutes=slot.time) < now:
            continue
        left = remaining_from_usage(
            slot.max_seats, slot.max_tables, usage.get(slot.time_str, Usage())
        )
        result.slots.append(SlotAvailability(
            time=slot.time,
            remaining_seats=left.seats,
            remaining_tables=left.tables,
            is_available=left.fits(party_size),
        ))

    # Step 7: Chronological order (+ nearby options)
    result.slots.sort(key=lambda s: s.time)
    if requested_time is not None:
        bookable = [slot for slot in result.slots if slot.is_available]
        result.requested_time_available = any(s.time == requested_time for s in bookable)
        result.closest = rank_closest(
            bookable, requested_time, config.closest_slots_count, key=lambda s: s.time
        )

    return result


def get_calendar(
    db: Session,
    branch_id: int,
    start_date: date | None,
    end_date: date | None,
    party_size: int,
    now: datetime,
    redis: Redis | None = None,
    config: BookingConfig | None = None,
) -> list[CalendarDay]:
    """
    Per-day availability summary, clamped to [today, today + horizon_days].
    """
    config = config or get_booking_config()
    today = now.date()
    last_day = today + timedelta(days=config.horizon_days)

    start_date = max(start_date or today, today)
    end_date = min(end_date or last_day, last_day)
    if end_date < start_date:
        end_date = start_date

    days = []
    for dt in get_affected_dates(start_date, end_date):
        result = get_availability(
            db, branch_id, dt, party_size, now,
            redis=redis, config=config, rollover=False,
        )
        days.append(CalendarDay(
            date=dt,
            closed=result.closed,
            open_slots_count=sum(1 for slot in result.slots if slot.is_available),
        ))
    return days


# ── Day grid (with cache) ────────────────────────────────────────────────


def _get_day_grid(
    db: Session,
    branch_id: int,
    target_date: date,
    config: BookingConfig,
    redis: Redis | None,
) -> DayGrid:
    """
    Day grid from the Redis cache, else resolved from settings + override.

    time_slots rows are not read here: they only anchor the booking lock
    and are rewritten whenever settings or overrides change.
    """
    if redis is not None:
        store = SlotsRedisStore(redis, config)
        try:
            cached = store.get_day_grid(branch_id, target_date)
        except RedisError:
            logger.exception(f"Slots cache read failed for branch={branch_id}")
            cached = None
        if cached is not None:
            return cached

    # Cache miss: calculate and store
    grid = load_day_grid(db, branch_id, target_date)

    if redis is not None:
        try:
            SlotsRedisStore(redis, config).store_day_grid(branch_id, grid)
        except RedisError:
            logger.exception(f"Slots cache write failed for branch={branch_id}")

    return grid
