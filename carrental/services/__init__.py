from carrental.services.availability import AvailabilityChecker
from carrental.services.booking_service import BookingService
from carrental.services.car_service import CarService
from carrental.services.email_service import EmailService
from carrental.services.notification_service import NotificationService
from carrental.services.payment_gateway import PaymentGateway, SimulatedGateway
from carrental.services.payment_service import PaymentRequest, PaymentService

__all__ = [
    "AvailabilityChecker",
    "BookingService",
    "CarService",
    "EmailService",
    "NotificationService",
    "PaymentGateway",
    "PaymentRequest",
    "PaymentService",
    "SimulatedGateway",
]
