from carrental.extensions import db
from carrental.models.base import PKType, TimestampMixin


class Location(TimestampMixin, db.Model):
    __tablename__ = "locations"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    name = db.Column(db.String(140), nullable=False)
    address = db.Column(db.String(255), nullable=False, default="")
    city = db.Column(db.String(120), nullable=False, default="")
    country = db.Column(db.String(120), nullable=False, default="Azerbaijan")
    is_airport = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
