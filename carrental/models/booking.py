from carrental.extensions import db
from carrental.models.base import MoneyType, PKType, TimestampMixin


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"

    ALL = (PENDING, CONFIRMED, IN_PROGRESS, COMPLETED, CANCELLED, REJECTED)
    # Statuses that free the car for the booked dates.
    NON_BLOCKING = {CANCELLED, REJECTED}
    CANCELLABLE = {PENDING, CONFIRMED}
    TERMINAL = {COMPLETED, CANCELLED, REJECTED}


class Booking(TimestampMixin, db.Model):
    __tablename__ = "bookings"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    user_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    car_id = db.Column(PKType, db.ForeignKey("cars.id", ondelete="RESTRICT"), nullable=False, index=True)
    booking_number = db.Column(db.String(20), nullable=False, unique=True, index=True)

    start_date = db.Column(db.Date, nullable=False, index=True)
    end_date = db.Column(db.Date, nullable=False)
    total_days = db.Column(db.Integer, nullable=False)

    # Cost breakdown captured at creation time; never recalculated.
    price_per_day = db.Column(MoneyType, nullable=False)
    sub_total = db.Column(MoneyType, nullable=False)
    driver_cost = db.Column(MoneyType, nullable=False, default=0)
    insurance_cost = db.Column(MoneyType, nullable=False, default=0)
    gps_cost = db.Column(MoneyType, nullable=False, default=0)
    child_seat_cost = db.Column(MoneyType, nullable=False, default=0)
    additional_drivers_cost = db.Column(MoneyType, nullable=False, default=0)
    tax_amount = db.Column(MoneyType, nullable=False)
    discount_amount = db.Column(MoneyType, nullable=False, default=0)
    deposit_amount = db.Column(MoneyType, nullable=False, default=0)
    total_amount = db.Column(MoneyType, nullable=False)

    pickup_location_id = db.Column(PKType, db.ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False)
    return_location_id = db.Column(PKType, db.ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False)
    actual_pickup_time = db.Column(db.DateTime(timezone=True), nullable=True)
    actual_return_time = db.Column(db.DateTime(timezone=True), nullable=True)

    assigned_driver_id = db.Column(PKType, db.ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True)
    needs_driver = db.Column(db.Boolean, nullable=False, default=False)
    with_insurance = db.Column(db.Boolean, nullable=False, default=True)
    with_gps = db.Column(db.Boolean, nullable=False, default=False)
    with_child_seat = db.Column(db.Boolean, nullable=False, default=False)
    additional_drivers = db.Column(db.Integer, nullable=False, default=0)

    status = db.Column(db.String(24), nullable=False, default=BookingStatus.PENDING, index=True)
    notes = db.Column(db.Text, nullable=True)
    cancellation_reason = db.Column(db.Text, nullable=True)
    cancelled_at = db.Column(db.DateTime(timezone=True), nullable=True)

    contact_phone = db.Column(db.String(20), nullable=False, default="")
    contact_email = db.Column(db.String(255), nullable=False, default="")

    __table_args__ = (
        db.Index("ix_bookings_user_status", "user_id", "status"),
        db.Index("ix_bookings_car_status", "car_id", "status"),
        db.CheckConstraint("end_date >= start_date", name="ck_booking_date_range"),
        db.CheckConstraint("total_days > 0", name="ck_booking_days_positive"),
    )
