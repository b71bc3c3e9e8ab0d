# backend/tablebook/services/settings_service.py
"""
Branch booking settings.

One record per branch, replaced on update. Every change regenerates the
materialized slots of the forward horizon and drops the branch's cached
day grids.
"""

import logging
from datetime import datetime

from redis import Redis
from sqlalchemy.orm import Session

from ..errors import SettingsNotFound
from ..models.generated import BookingSettings
from ..schemas.booking_settings import BookingSettingsWrite
from .slots.calculator import get_branch_settings
from .slots.config import BookingConfig, get_booking_config
from .slots.invalidator import invalidate_branch_cache
from .slots.materializer import regenerate_range

logger = logging.getLogger(__name__)


def get_settings(db: Session, branch_id: int) -> BookingSettings:
    settings = get_branch_settings(db, branch_id)
    if settings is None:
        raise SettingsNotFound(branch_id=branch_id)
    return settings


def configure_settings(
    db: Session,
    branch_id: int,
    data: BookingSettingsWrite,
    now: datetime,
    redis: Redis | None = None,
    config: BookingConfig | None = None,
) -> BookingSettings:
    """Create or replace the settings of a branch and regenerate its slots."""
    config = config or get_booking_config()

    settings = get_branch_settings(db, branch_id)
    created = settings is None
    if created:
        settings = BookingSettings(branch_id=branch_id)
        db.add(settings)

    for name, value in data.model_dump().items():
        setattr(settings, name, value)
    db.flush()

    stats = regenerate_range(db, branch_id, now.date(), config.horizon_days)
    db.commit()

    invalidate_branch_cache(redis, branch_id)

    logger.info(
        f"Booking settings {'created' if created else 'updated'}: branch={branch_id} "
        f"{settings.open_time}-{settings.close_time} every {settings.interval_minutes}m "
        f"seats={settings.max_seats_per_slot} tables={settings.max_tables_per_slot} "
        f"(slots +{stats.created} ~{stats.updated} -{stats.deleted})"
    )
    return settings
