from carrental.extensions import db
from carrental.models.base import MoneyType, PKType, TimestampMixin


class PaymentStatus:
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class PaymentMethod:
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    STRIPE = "stripe"
    PAYPAL = "paypal"

    ALL = {CREDIT_CARD, DEBIT_CARD, CASH, BANK_TRANSFER, STRIPE, PAYPAL}


class Payment(TimestampMixin, db.Model):
    __tablename__ = "payments"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    booking_id = db.Column(PKType, db.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    user_id = db.Column(PKType, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    transaction_id = db.Column(db.String(40), nullable=False, unique=True, index=True)
    payment_reference = db.Column(db.String(40), nullable=False)

    amount = db.Column(MoneyType, nullable=False)
    method = db.Column(db.String(24), nullable=False)
    status = db.Column(db.String(24), nullable=False, default=PaymentStatus.PENDING, index=True)

    card_last_four_digits = db.Column(db.String(4), nullable=True)
    card_brand = db.Column(db.String(32), nullable=True)

    paid_at = db.Column(db.DateTime(timezone=True), nullable=True)

    gateway_response = db.Column(db.Text, nullable=True)
    failure_reason = db.Column(db.String(255), nullable=True)

    invoice_url = db.Column(db.String(500), nullable=True)
    invoice_generated = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            "id": self.id,
            "booking_id": self.booking_id,
            "transaction_id": self.transaction_id,
            "payment_reference": self.payment_reference,
            "amount": str(self.amount),
            "method": self.method,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "card_last_four_digits": self.card_last_four_digits,
            "card_brand": self.card_brand,
            "failure_reason": self.failure_reason,
            "invoice_url": self.invoice_url,
        }
