from flask import Blueprint, current_app, request
from flask_login import current_user, login_required

from carrental.extensions import limiter
from carrental.services import PaymentRequest, PaymentService

api_payment_bp = Blueprint("api_payment", __name__)


@api_payment_bp.post("/process")
@login_required
@limiter.limit(lambda: current_app.config["RATELIMIT_PAYMENT"])
def process_payment():
    payload = request.get_json(silent=True) or {}
    result = PaymentService.settle(current_user, PaymentRequest.from_payload(payload))
    # A declined card is a business outcome, not a client error.
    return result.to_response(failure_status=402)


@api_payment_bp.get("/me")
@login_required
def my_payments():
    return PaymentService.list_user_payments(current_user.id).to_response()


@api_payment_bp.get("/<int:payment_id>")
@login_required
def payment_details(payment_id):
    return PaymentService.get_payment(current_user, payment_id).to_response()


@api_payment_bp.post("/<int:payment_id>/invoice")
@login_required
def generate_invoice(payment_id):
    return PaymentService.generate_invoice(current_user, payment_id).to_response()
