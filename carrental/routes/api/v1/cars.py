from flask import Blueprint, request
from flask_login import login_required

from carrental.services import CarService

api_car_bp = Blueprint("api_car", __name__)


@api_car_bp.get("/available")
@login_required
def available_cars():
    result = CarService.list_available(request.args.get("start_date"), request.args.get("end_date"))
    return result.to_response()


@api_car_bp.get("/check-availability")
@login_required
def check_availability():
    result = CarService.check_availability(
        request.args.get("car_id"), request.args.get("start_date"), request.args.get("end_date")
    )
    return result.to_response()
