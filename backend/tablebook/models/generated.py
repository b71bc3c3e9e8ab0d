from sqlalchemy import CheckConstraint, Column, Index, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata


class BookingSettings(Base):
    __tablename__ = 'booking_settings'
    __table_args__ = (
        CheckConstraint('interval_minutes > 0'),
        CheckConstraint('max_seats_per_slot > 0'),
        CheckConstraint('max_tables_per_slot > 0'),
    )

    branch_id = Column(Integer, nullable=False, unique=True)
    open_time = Column(Text, nullable=False)  # "HH:MM"
    close_time = Column(Text, nullable=False)  # "HH:MM", "24:00" = end of day
    interval_minutes = Column(Integer, nullable=False, server_default=text('90'))
    max_seats_per_slot = Column(Integer, nullable=False, server_default=text('25'))
    max_tables_per_slot = Column(Integer, nullable=False, server_default=text('10'))
    id = Column(Integer, primary_key=True)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(
        Text, nullable=False,
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=text('CURRENT_TIMESTAMP'),
    )


class BookingOverrides(Base):
    __tablename__ = 'booking_overrides'
    __table_args__ = (
        UniqueConstraint('branch_id', 'date'),
        CheckConstraint("override_type IN ('closed', 'modified')"),
    )

    branch_id = Column(Integer, nullable=False)
    date = Column(Text, nullable=False)  # "YYYY-MM-DD"
    override_type = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    start_time = Column(Text)
    end_time = Column(Text)
    new_max_seats = Column(Integer)  # NULL = inherit, 0 = no capacity
    new_max_tables = Column(Integer)
    note = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(
        Text, nullable=False,
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=text('CURRENT_TIMESTAMP'),
    )


class TimeSlots(Base):
    __tablename__ = 'time_slots'
    __table_args__ = (
        UniqueConstraint('branch_id', 'date', 'time'),
    )

    branch_id = Column(Integer, nullable=False)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)  # "HH:MM"
    max_seats = Column(Integer, nullable=False)
    max_tables = Column(Integer, nullable=False)
    id = Column(Integer, primary_key=True)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(
        Text, nullable=False,
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=text('CURRENT_TIMESTAMP'),
    )


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        CheckConstraint('party_size > 0'),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')"
        ),
        Index('ix_bookings_slot', 'branch_id', 'date', 'time', 'status'),
    )

    branch_id = Column(Integer, nullable=False)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    party_size = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(
        Text, nullable=False,
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=text('CURRENT_TIMESTAMP'),
    )
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer)
    guest_name = Column(Text)
    guest_phone = Column(Text)
    notes = Column(Text)
    cancel_reason = Column(Text)
