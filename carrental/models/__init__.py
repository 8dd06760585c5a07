from carrental.models.booking import Booking, BookingStatus
from carrental.models.car import Car, CarStatus
from carrental.models.driver import Driver
from carrental.models.location import Location
from carrental.models.notification import Notification
from carrental.models.payment import Payment, PaymentMethod, PaymentStatus
from carrental.models.user import ADMIN_ROLES, USER_ROLES, User

__all__ = [
    "ADMIN_ROLES",
    "USER_ROLES",
    "User",
    "Location",
    "Car",
    "CarStatus",
    "Driver",
    "Booking",
    "BookingStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Notification",
]
