from carrental.extensions import db
from carrental.models.base import PKType, TimestampMixin


class Driver(TimestampMixin, db.Model):
    __tablename__ = "drivers"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    user_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    license_number = db.Column(db.String(40), nullable=False)
    status = db.Column(db.String(24), nullable=False, default="available", index=True)
    is_approved = db.Column(db.Boolean, nullable=False, default=False, index=True)
