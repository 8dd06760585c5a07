from flask import Blueprint

from carrental.routes.api.v1.admin import api_admin_bp
from carrental.routes.api.v1.bookings import api_booking_bp
from carrental.routes.api.v1.cars import api_car_bp
from carrental.routes.api.v1.notifications import api_notification_bp
from carrental.routes.api.v1.payments import api_payment_bp

api_v1_bp = Blueprint("api_v1", __name__)
api_v1_bp.register_blueprint(api_booking_bp, url_prefix="/bookings")
api_v1_bp.register_blueprint(api_car_bp, url_prefix="/cars")
api_v1_bp.register_blueprint(api_payment_bp, url_prefix="/payments")
api_v1_bp.register_blueprint(api_admin_bp, url_prefix="/admin")
api_v1_bp.register_blueprint(api_notification_bp, url_prefix="/notifications")
