from carrental.extensions import db
from carrental.models.base import MoneyType, PKType, TimestampMixin


class CarStatus:
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"
    RESERVED = "reserved"

    ALL = {AVAILABLE, RENTED, MAINTENANCE, OUT_OF_SERVICE, RESERVED}


class Car(TimestampMixin, db.Model):
    __tablename__ = "cars"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    brand = db.Column(db.String(80), nullable=False)
    model = db.Column(db.String(80), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    license_plate = db.Column(db.String(20), nullable=False, unique=True)
    category = db.Column(db.String(40), nullable=False, default="Economy")

    price_per_day = db.Column(MoneyType, nullable=False)
    deposit_amount = db.Column(MoneyType, nullable=False, default=0)
    discount_percentage = db.Column(db.Numeric(5, 2), nullable=False, default=0)

    status = db.Column(db.String(24), nullable=False, default=CarStatus.AVAILABLE, index=True)
    is_available_for_booking = db.Column(db.Boolean, nullable=False, default=True, index=True)
    location_id = db.Column(PKType, db.ForeignKey("locations.id", ondelete="SET NULL"), nullable=True, index=True)
    main_image_url = db.Column(db.String(500), nullable=False, default="")

    __table_args__ = (
        db.CheckConstraint("price_per_day >= 0", name="ck_car_price_non_negative"),
        db.CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="ck_car_discount_range",
        ),
    )

    @property
    def display_name(self):
        return f"{self.brand} {self.model}"

    def to_dict(self):
        return {
            "id": self.id,
            "brand": self.brand,
            "model": self.model,
            "year": self.year,
            "display_name": self.display_name,
            "category": self.category,
            "price_per_day": str(self.price_per_day),
            "deposit_amount": str(self.deposit_amount),
            "discount_percentage": str(self.discount_percentage),
            "status": self.status,
            "location_id": self.location_id,
            "main_image_url": self.main_image_url,
        }
