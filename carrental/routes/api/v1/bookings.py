from flask import Blueprint, current_app, request
from flask_login import current_user, login_required

from carrental.decorators import role_required
from carrental.extensions import limiter
from carrental.models import ADMIN_ROLES
from carrental.pricing import RentalRequest
from carrental.services import BookingService

api_booking_bp = Blueprint("api_booking", __name__)


@api_booking_bp.post("")
@login_required
@limiter.limit(lambda: current_app.config["RATELIMIT_BOOKING"])
def create_booking():
    payload = request.get_json(silent=True) or {}
    result = BookingService.create_booking(current_user, RentalRequest.from_payload(payload))
    return result.to_response(201, serializer=BookingService.to_details)


@api_booking_bp.post("/calculate")
@login_required
def calculate_cost():
    payload = request.get_json(silent=True) or {}
    result = BookingService.calculate_cost(RentalRequest.from_payload(payload))
    return result.to_response(serializer=lambda cost: cost.to_dict())


@api_booking_bp.get("/me")
@login_required
def my_bookings():
    return BookingService.list_user_bookings(current_user.id).to_response()


@api_booking_bp.get("/<int:booking_id>")
@login_required
def booking_details(booking_id):
    return BookingService.get_booking(current_user, booking_id).to_response()


@api_booking_bp.get("/track/<booking_number>")
@login_required
def track_booking(booking_number):
    return BookingService.track_booking(current_user, booking_number).to_response()


@api_booking_bp.put("/<int:booking_id>/cancel")
@login_required
def cancel_booking(booking_id):
    payload = request.get_json(silent=True) or {}
    result = BookingService.cancel_booking(current_user, booking_id, reason=payload.get("reason"))
    return result.to_response(serializer=BookingService.to_details)


@api_booking_bp.put("/update-status")
@login_required
@role_required(*ADMIN_ROLES)
def update_status():
    payload = request.get_json(silent=True) or {}
    result = BookingService.update_status(
        current_user,
        payload.get("booking_id"),
        payload.get("status"),
        notes=(payload.get("notes") or "").strip() or None,
    )
    return result.to_response(serializer=BookingService.to_details)
