"""Persistence helpers over the SQLAlchemy models.

Every write goes through a store so that timestamps and soft deletes are
applied in one place. Stores flush but never commit; committing belongs to
the operation that owns the transaction (see :func:`transaction`).
"""

from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import and_, not_, or_

from carrental.extensions import db
from carrental.models import (
    Booking,
    BookingStatus,
    Car,
    CarStatus,
    Driver,
    Location,
    Notification,
    Payment,
    PaymentStatus,
    User,
)
from carrental.pricing import RateCard


def utcnow():
    return datetime.now(timezone.utc)


@contextmanager
def transaction():
    """Atomic scope: commit when the block exits cleanly, roll back otherwise."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


class ModelStore:
    model = None

    @classmethod
    def query(cls):
        return cls.model.query.filter(cls.model.is_deleted.is_(False))

    @classmethod
    def get(cls, entity_id):
        if entity_id is None:
            return None
        return cls.query().filter(cls.model.id == entity_id).first()

    @classmethod
    def insert(cls, entity):
        now = utcnow()
        entity.created_at = now
        entity.updated_at = now
        entity.is_deleted = False
        db.session.add(entity)
        db.session.flush()
        return entity

    @classmethod
    def update(cls, entity):
        entity.updated_at = utcnow()
        db.session.flush()
        return entity

    @classmethod
    def delete(cls, entity):
        now = utcnow()
        entity.is_deleted = True
        entity.deleted_at = now
        entity.updated_at = now
        db.session.flush()
        return entity


class UserStore(ModelStore):
    model = User

    @classmethod
    def get_by_subject(cls, subject):
        if not subject:
            return None
        return cls.query().filter(User.external_subject == subject).first()


class LocationStore(ModelStore):
    model = Location

    @classmethod
    def get_active(cls, location_id):
        location = cls.get(location_id)
        if location is None or not location.is_active:
            return None
        return location


class DriverStore(ModelStore):
    model = Driver


class CarStore(ModelStore):
    model = Car

    @classmethod
    def get_rate_card(cls, car_id):
        car = cls.get(car_id)
        if car is None:
            return None
        return RateCard.from_car(car)

    @classmethod
    def list_bookable(cls):
        return (
            cls.query()
            .filter(Car.status == CarStatus.AVAILABLE, Car.is_available_for_booking.is_(True))
            .order_by(Car.created_at, Car.id)
            .all()
        )

    @classmethod
    def lock(cls, car_id):
        # Row lock held until the surrounding transaction ends. SQLite ignores
        # FOR UPDATE and relies on its single-writer lock instead.
        return cls.query().filter(Car.id == car_id).with_for_update().first()

    @classmethod
    def set_status(cls, car_id, status):
        car = cls.get(car_id)
        if car is None:
            return None
        car.status = status
        return cls.update(car)


class BookingStore(ModelStore):
    model = Booking

    @classmethod
    def get_by_number(cls, booking_number):
        if not booking_number:
            return None
        return cls.query().filter(Booking.booking_number == booking_number).first()

    @classmethod
    def lock(cls, booking_id):
        return cls.query().filter(Booking.id == booking_id).with_for_update().first()

    @classmethod
    def _holding(cls, start_date, end_date):
        return (
            cls.query()
            .filter(Booking.status.notin_(BookingStatus.NON_BLOCKING))
            .filter(not_(or_(Booking.start_date > end_date, Booking.end_date < start_date)))
        )

    @classmethod
    def exists_overlap(cls, car_id, start_date, end_date, exclude_id=None):
        """Inclusive day-range intersection against bookings that still hold the car."""
        query = cls._holding(start_date, end_date).filter(Booking.car_id == car_id)
        if exclude_id is not None:
            query = query.filter(Booking.id != exclude_id)
        return db.session.query(query.exists()).scalar()

    @classmethod
    def held_car_ids(cls, start_date, end_date):
        query = cls._holding(start_date, end_date).with_entities(Booking.car_id).distinct()
        return {car_id for (car_id,) in query}

    @classmethod
    def list_for_user(cls, user_id):
        return cls.query().filter(Booking.user_id == user_id).order_by(Booking.created_at.desc()).all()

    @classmethod
    def paginate(cls, status=None, page=1, per_page=20):
        query = cls.query().order_by(Booking.created_at.desc())
        if status:
            query = query.filter(Booking.status == status)
        return query.paginate(page=page, per_page=per_page, error_out=False)


class PaymentStore(ModelStore):
    model = Payment

    @classmethod
    def find_for_booking(cls, booking_id):
        return cls.query().filter(Payment.booking_id == booking_id).first()

    @classmethod
    def find_completed_for_booking(cls, booking_id):
        return (
            cls.query()
            .filter(and_(Payment.booking_id == booking_id, Payment.status == PaymentStatus.COMPLETED))
            .first()
        )

    @classmethod
    def list_for_user(cls, user_id):
        return cls.query().filter(Payment.user_id == user_id).order_by(Payment.created_at.desc()).all()


class NotificationStore(ModelStore):
    model = Notification

    @classmethod
    def latest_for_user(cls, user_id, limit=10):
        return (
            cls.query()
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    @classmethod
    def unread_count(cls, user_id):
        return cls.query().filter(Notification.user_id == user_id, Notification.is_read.is_(False)).count()

    @classmethod
    def mark_all_read(cls, user_id):
        now = utcnow()
        return (
            cls.query()
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({"is_read": True, "read_at": now, "updated_at": now}, synchronize_session=False)
        )
