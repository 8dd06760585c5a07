from flask import Blueprint, request
from flask_login import current_user, login_required

from carrental.decorators import role_required
from carrental.models import ADMIN_ROLES
from carrental.services import BookingService

api_admin_bp = Blueprint("api_admin", __name__)


@api_admin_bp.get("/bookings")
@login_required
@role_required(*ADMIN_ROLES)
def list_bookings():
    page = request.args.get("page", 1, type=int)
    per_page = min(request.args.get("per_page", 20, type=int), 100)
    result = BookingService.list_bookings(
        current_user, status=request.args.get("status"), page=page, per_page=per_page
    )
    return result.to_response()


@api_admin_bp.put("/bookings/<int:booking_id>/approve")
@login_required
@role_required(*ADMIN_ROLES)
def approve_booking(booking_id):
    result = BookingService.approve_booking(current_user, booking_id)
    return result.to_response(serializer=BookingService.to_details)


@api_admin_bp.put("/bookings/<int:booking_id>/reject")
@login_required
@role_required(*ADMIN_ROLES)
def reject_booking(booking_id):
    payload = request.get_json(silent=True) or {}
    result = BookingService.reject_booking(current_user, booking_id, payload.get("reason"))
    return result.to_response(serializer=BookingService.to_details)
