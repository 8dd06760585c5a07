from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import uuid4

from flask import current_app
from sqlalchemy.exc import IntegrityError

from carrental.errors import (
    AlreadyPaidError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from carrental.models import BookingStatus, CarStatus, Payment, PaymentMethod, PaymentStatus
from carrental.pricing import to_money
from carrental.results import ServiceResult, service_operation
from carrental.services.booking_service import BookingService
from carrental.services.email_service import EmailService
from carrental.services.notification_service import NotificationService
from carrental.services.payment_gateway import ChargeRequest, get_gateway
from carrental.stores import BookingStore, CarStore, PaymentStore, transaction, utcnow

CARD_METHODS = {PaymentMethod.CREDIT_CARD, PaymentMethod.DEBIT_CARD}
UNPAYABLE_STATUSES = {
    BookingStatus.IN_PROGRESS,
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED,
    BookingStatus.REJECTED,
}


@dataclass(frozen=True)
class PaymentRequest:
    booking_id: int
    method: str
    amount: Optional[Decimal] = None
    card_number: Optional[str] = None
    card_holder: Optional[str] = None

    @classmethod
    def from_payload(cls, payload):
        try:
            booking_id = int(payload.get("booking_id"))
        except (TypeError, ValueError) as exc:
            raise ValidationError("Booking is required.") from exc

        amount = payload.get("amount")
        if amount is not None:
            try:
                amount = Decimal(str(amount))
            except InvalidOperation as exc:
                raise ValidationError("Invalid payment amount.") from exc

        card_number = "".join(ch for ch in str(payload.get("card_number") or "") if ch.isdigit()) or None
        return cls(
            booking_id=booking_id,
            method=(payload.get("method") or "").strip().lower(),
            amount=amount,
            card_number=card_number,
            card_holder=(payload.get("card_holder") or "").strip() or None,
        )

    def validate(self):
        if self.method not in PaymentMethod.ALL:
            raise ValidationError("Invalid payment method.")
        if self.method in CARD_METHODS and (not self.card_number or len(self.card_number) < 12):
            raise ValidationError("A valid card number is required.")
        return self


def detect_card_brand(card_number):
    if not card_number or len(card_number) < 2:
        return None
    if card_number.startswith("4"):
        return "Visa"
    prefix = card_number[:2]
    if prefix in {"51", "52", "53", "54", "55"}:
        return "Mastercard"
    if prefix in {"34", "37"}:
        return "American Express"
    if prefix in {"60", "64", "65"}:
        return "Discover"
    return "Unknown"


class PaymentService:
    @staticmethod
    def _generate_transaction_id():
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        return f"TXN{stamp}{uuid4().hex[:8].upper()}"

    @staticmethod
    def _invoice_url(payment):
        base_url = current_app.config["INVOICE_BASE_URL"].rstrip("/")
        return f"{base_url}/{payment.transaction_id}.pdf"

    @staticmethod
    def _get_payment(actor, payment_id):
        payment = PaymentStore.get(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found.")
        if actor is None or (payment.user_id != actor.id and not actor.is_admin):
            raise UnauthorizedError("Not authorized for this payment.")
        return payment

    @staticmethod
    @service_operation
    def settle(user, request, gateway=None):
        request.validate()
        gateway = gateway or get_gateway()

        with transaction():
            # Held until commit so a second settlement for the same booking waits here.
            booking = BookingStore.lock(request.booking_id)
            if booking is None:
                raise NotFoundError("Booking not found.")
            if booking.user_id != user.id:
                raise UnauthorizedError("Unauthorized.")
            if PaymentStore.find_completed_for_booking(booking.id) is not None:
                raise AlreadyPaidError("Booking already paid.")
            if booking.status in UNPAYABLE_STATUSES:
                raise InvalidStateError("This booking can no longer be paid.")

            amount = to_money(booking.total_amount)
            if request.amount is not None and to_money(request.amount) != amount:
                raise ValidationError(f"Payment amount must equal the booking total of {amount}.")

            outcome = gateway.charge(
                ChargeRequest(
                    amount=amount,
                    method=request.method,
                    reference=booking.booking_number,
                    card_number=request.card_number,
                    card_holder=request.card_holder,
                )
            )
            gateway_name = getattr(gateway, "name", type(gateway).__name__)
            booking_number = booking.booking_number
            current_app.logger.info(
                "Gateway %s for booking %s: %s",
                gateway_name,
                booking_number,
                "approved" if outcome.success else outcome.failure_reason,
            )

            now = utcnow()
            # One payment row per booking; a declined attempt is overwritten by the retry.
            payment = PaymentStore.find_for_booking(booking.id)
            is_new = payment is None
            if is_new:
                payment = Payment(booking_id=booking.id, user_id=user.id)
            payment.transaction_id = PaymentService._generate_transaction_id()
            payment.payment_reference = f"PAY-{now.strftime('%Y%m%d%H%M%S')}"
            payment.amount = amount
            payment.method = request.method
            payment.status = PaymentStatus.COMPLETED if outcome.success else PaymentStatus.FAILED
            payment.paid_at = now if outcome.success else None
            payment.card_last_four_digits = request.card_number[-4:] if request.card_number else None
            payment.card_brand = detect_card_brand(request.card_number)
            payment.gateway_response = outcome.raw_response
            payment.failure_reason = outcome.failure_reason
            if is_new:
                try:
                    PaymentStore.insert(payment)
                except IntegrityError as exc:
                    current_app.logger.error(
                        "Booking %s already has a payment row; %s charge %s needs reconciliation",
                        booking_number,
                        gateway_name,
                        "approved" if outcome.success else "declined",
                    )
                    raise AlreadyPaidError("Booking already paid.") from exc
            else:
                PaymentStore.update(payment)

            if outcome.success:
                booking.status = BookingStatus.CONFIRMED
                BookingStore.update(booking)
                CarStore.set_status(booking.car_id, CarStatus.RESERVED)

                payment.invoice_url = PaymentService._invoice_url(payment)
                payment.invoice_generated = True
                PaymentStore.update(payment)

                NotificationService.push(
                    user.id,
                    "Payment Successful",
                    f"Your payment of ${amount:.2f} has been processed successfully. "
                    f"Booking #{booking.booking_number} is confirmed.",
                )
            else:
                NotificationService.push(
                    user.id,
                    "Payment Failed",
                    f"Your payment of ${amount:.2f} failed. {outcome.failure_reason}",
                )

        if outcome.success:
            EmailService.send_booking_confirmation(booking.contact_email, BookingService.to_details(booking))
            return ServiceResult.ok(payment.to_dict(), "Payment processed successfully")
        return ServiceResult(success=False, message="Payment failed", data=payment.to_dict())

    @staticmethod
    @service_operation
    def get_payment(actor, payment_id):
        return ServiceResult.ok(PaymentService._get_payment(actor, payment_id).to_dict())

    @staticmethod
    @service_operation
    def list_user_payments(user_id):
        return ServiceResult.ok([payment.to_dict() for payment in PaymentStore.list_for_user(user_id)])

    @staticmethod
    @service_operation
    def generate_invoice(actor, payment_id):
        with transaction():
            payment = PaymentService._get_payment(actor, payment_id)
            if payment.status != PaymentStatus.COMPLETED:
                raise InvalidStateError("Invoices are only available for completed payments.")
            payment.invoice_url = PaymentService._invoice_url(payment)
            payment.invoice_generated = True
            PaymentStore.update(payment)
        return ServiceResult.ok(payment.invoice_url, "Invoice generated successfully")
