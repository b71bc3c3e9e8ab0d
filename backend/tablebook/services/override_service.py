# backend/tablebook/services/override_service.py
"""
Day overrides of a branch.

At most one override per (branch, date): checked before insert and
enforced by the unique constraint. Every mutation regenerates the
materialized slots of the affected date(s) and drops their cached grids.
"""

import logging
from datetime import date

from redis import Redis
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import InvalidFormat, OverrideConflict, OverrideNotFound
from ..models.generated import BookingOverrides
from ..schemas.booking_overrides import BookingOverrideCreate, BookingOverrideUpdate
from .slots.calculator import get_branch_settings
from .slots.invalidator import invalidate_branch_cache
from .slots.materializer import regenerate_date
from .slots.overrides import OVERRIDE_MODIFIED
from .slots.timeutils import parse_time

logger = logging.getLogger(__name__)


def get_override(db: Session, override_id: int) -> BookingOverrides:
    obj = db.get(BookingOverrides, override_id)
    if obj is None:
        raise OverrideNotFound(override_id=override_id)
    return obj


def list_overrides(
    db: Session,
    branch_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[BookingOverrides]:
    query = db.query(BookingOverrides).filter(BookingOverrides.branch_id == branch_id)
    if start_date is not None:
        query = query.filter(BookingOverrides.date >= start_date.isoformat())
    if end_date is not None:
        query = query.filter(BookingOverrides.date <= end_date.isoformat())
    return query.order_by(BookingOverrides.date).all()


def create_override(
    db: Session,
    branch_id: int,
    data: BookingOverrideCreate,
    redis: Redis | None = None,
) -> BookingOverrides:
    """
    Raises:
        OverrideConflict: the branch already has an override on that date
    """
    _ensure_date_free(db, branch_id, data.date)

    values = data.model_dump()
    values["date"] = data.date.isoformat()
    obj = BookingOverrides(branch_id=branch_id, **values)
    _validate_window(db, obj)
    db.add(obj)
    _commit_with_regeneration(db, branch_id, [data.date], redis, claimed_date=data.date)

    logger.info(
        f"Override created: id={obj.id} branch={branch_id} date={obj.date} type={obj.override_type}"
    )
    return obj


def update_override(
    db: Session,
    override_id: int,
    data: BookingOverrideUpdate,
    redis: Redis | None = None,
) -> BookingOverrides:
    """
    Apply the fields present in `data`.

    Raises:
        OverrideNotFound: unknown id
        OverrideConflict: moved onto a date that already has an override
    """
    obj = get_override(db, override_id)
    old_date = date.fromisoformat(obj.date)

    changes = data.model_dump(exclude_unset=True)
    new_date = changes.pop("date", None) or old_date
    if new_date != old_date:
        _ensure_date_free(db, obj.branch_id, new_date)
        obj.date = new_date.isoformat()

    for name, value in changes.items():
        setattr(obj, name, value)
    _validate_window(db, obj)

    affected = [old_date] if new_date == old_date else [old_date, new_date]
    claimed_date = new_date if new_date != old_date else None
    _commit_with_regeneration(db, obj.branch_id, affected, redis, claimed_date=claimed_date)

    logger.info(f"Override updated: id={obj.id} branch={obj.branch_id} date={obj.date}")
    return obj


def delete_override(db: Session, override_id: int, redis: Redis | None = None) -> None:
    obj = get_override(db, override_id)
    branch_id = obj.branch_id
    target_date = date.fromisoformat(obj.date)

    db.delete(obj)
    _commit_with_regeneration(db, branch_id, [target_date], redis)

    logger.info(f"Override deleted: id={override_id} branch={branch_id} date={target_date.isoformat()}")


# ── Helpers ──────────────────────────────────────────────────────────────


def _date_taken(db: Session, branch_id: int, target_date: date) -> bool:
    exists = (
        db.query(BookingOverrides.id)
        .filter(
            BookingOverrides.branch_id == branch_id,
            BookingOverrides.date == target_date.isoformat(),
        )
        .first()
    )
    return exists is not None


def _ensure_date_free(db: Session, branch_id: int, target_date: date) -> None:
    if _date_taken(db, branch_id, target_date):
        db.rollback()
        raise OverrideConflict(branch_id=branch_id, date=target_date.isoformat())


def _validate_window(db: Session, obj: BookingOverrides) -> None:
    """end_time must be after the start, or after the base opening when no start is set."""
    if obj.override_type != OVERRIDE_MODIFIED or not obj.end_time:
        return

    start_time = obj.start_time
    if not start_time:
        settings = get_branch_settings(db, obj.branch_id)
        if settings is None:
            return
        start_time = settings.open_time

    if parse_time(obj.end_time, allow_end_of_day=True) <= parse_time(start_time):
        db.rollback()
        raise InvalidFormat(f"end_time must be after the opening time {start_time}")


def _commit_with_regeneration(
    db: Session,
    branch_id: int,
    dates: list[date],
    redis: Redis | None,
    claimed_date: date | None = None,
) -> None:
    try:
        db.flush()
        for target_date in dates:
            regenerate_date(db, branch_id, target_date)
        db.commit()
    except IntegrityError:
        db.rollback()
        # Lost a race for the same (branch, date); other violations propagate
        if claimed_date is not None and _date_taken(db, branch_id, claimed_date):
            raise OverrideConflict(branch_id=branch_id, date=claimed_date.isoformat())
        raise

    invalidate_branch_cache(redis, branch_id, dates)
