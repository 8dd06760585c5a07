from datetime import datetime, timezone
from uuid import uuid4

from carrental import pricing
from carrental.decorators import require_role
from carrental.errors import ConflictError, InvalidStateError, NotFoundError, UnauthorizedError, ValidationError
from carrental.models import ADMIN_ROLES, Booking, BookingStatus, PaymentStatus
from carrental.results import ServiceResult, service_operation
from carrental.services.availability import AvailabilityChecker
from carrental.services.notification_service import NotificationService
from carrental.stores import (
    BookingStore,
    CarStore,
    DriverStore,
    LocationStore,
    PaymentStore,
    UserStore,
    transaction,
    utcnow,
)


class BookingService:
    @staticmethod
    def _status_label(status):
        return (status or "").replace("_", " ").title()

    @staticmethod
    def _generate_booking_number():
        today = datetime.now(timezone.utc).strftime("%Y%m%d")
        return f"BK{today}{uuid4().hex[:6].upper()}"

    @staticmethod
    def _get_booking(booking_id):
        booking = BookingStore.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found.")
        return booking

    @staticmethod
    def _ensure_owner_or_admin(actor, booking):
        if actor is None or (booking.user_id != actor.id and not actor.is_admin):
            raise UnauthorizedError("Not authorized for this booking.")

    @staticmethod
    @service_operation
    def calculate_cost(request):
        request.validate()
        rate_card = CarStore.get_rate_card(request.car_id)
        if rate_card is None:
            raise NotFoundError("Car not found.")
        return ServiceResult.ok(pricing.calculate(request, rate_card))

    @staticmethod
    @service_operation
    def create_booking(user, request):
        request.validate_for_booking()

        with transaction():
            # Lock the car row first so the overlap check and the insert are
            # not interleaved with another booking for the same car.
            car = CarStore.lock(request.car_id)
            if car is None:
                raise NotFoundError("Car not found.")
            if not car.is_available_for_booking:
                raise ConflictError("Car is not available for booking.")
            if LocationStore.get_active(request.pickup_location_id) is None:
                raise NotFoundError("Pickup location not found.")
            if LocationStore.get_active(request.return_location_id) is None:
                raise NotFoundError("Return location not found.")

            if AvailabilityChecker.is_overlapping(car.id, request.start_date, request.end_date):
                raise ConflictError("Car is not available for selected dates.")

            cost = pricing.calculate(request, pricing.RateCard.from_car(car))
            booking = Booking(
                user_id=user.id,
                car_id=car.id,
                booking_number=BookingService._generate_booking_number(),
                start_date=request.start_date,
                end_date=request.end_date,
                total_days=cost.total_days,
                price_per_day=cost.price_per_day,
                sub_total=cost.sub_total,
                driver_cost=cost.driver_cost,
                insurance_cost=cost.insurance_cost,
                gps_cost=cost.gps_cost,
                child_seat_cost=cost.child_seat_cost,
                additional_drivers_cost=cost.additional_drivers_cost,
                tax_amount=cost.tax_amount,
                discount_amount=cost.discount_amount,
                deposit_amount=cost.deposit_amount,
                total_amount=cost.total_amount,
                pickup_location_id=request.pickup_location_id,
                return_location_id=request.return_location_id,
                needs_driver=request.needs_driver,
                with_insurance=request.with_insurance,
                with_gps=request.with_gps,
                with_child_seat=request.with_child_seat,
                additional_drivers=request.additional_drivers,
                contact_phone=request.contact_phone,
                contact_email=request.contact_email,
                notes=request.notes,
                status=BookingStatus.PENDING,
            )
            BookingStore.insert(booking)

            NotificationService.push(
                user.id,
                "Booking Created",
                f"Your booking #{booking.booking_number} has been created successfully.",
            )

        return ServiceResult.ok(booking, "Booking created successfully")

    @staticmethod
    @service_operation
    def approve_booking(actor, booking_id):
        require_role(actor, ADMIN_ROLES)
        with transaction():
            booking = BookingService._get_booking(booking_id)
            if booking.status != BookingStatus.PENDING:
                raise InvalidStateError(
                    f"Only pending bookings can be approved. Current status: {BookingService._status_label(booking.status)}."
                )
            if AvailabilityChecker.is_overlapping(
                booking.car_id, booking.start_date, booking.end_date, exclude_booking_id=booking.id
            ):
                raise ConflictError("Car has been booked by someone else for these dates.")

            booking.status = BookingStatus.CONFIRMED
            BookingStore.update(booking)
            NotificationService.push(
                booking.user_id,
                "Booking Approved",
                f"Your booking #{booking.booking_number} has been approved.",
            )
        return ServiceResult.ok(booking, "Booking approved successfully")

    @staticmethod
    @service_operation
    def reject_booking(actor, booking_id, reason):
        require_role(actor, ADMIN_ROLES)
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A rejection reason is required.")

        with transaction():
            booking = BookingService._get_booking(booking_id)
            if booking.status != BookingStatus.PENDING:
                raise InvalidStateError(
                    f"Only pending bookings can be rejected. Current status: {BookingService._status_label(booking.status)}."
                )
            booking.status = BookingStatus.REJECTED
            booking.cancellation_reason = reason
            booking.cancelled_at = utcnow()
            BookingStore.update(booking)
            NotificationService.push(
                booking.user_id,
                "Booking Rejected",
                f"Your booking #{booking.booking_number} was rejected. {reason}",
            )
        return ServiceResult.ok(booking, "Booking rejected")

    @staticmethod
    @service_operation
    def cancel_booking(actor, booking_id, reason=None):
        with transaction():
            booking = BookingService._get_booking(booking_id)
            BookingService._ensure_owner_or_admin(actor, booking)
            if booking.status not in BookingStatus.CANCELLABLE:
                raise InvalidStateError("Cannot cancel this booking.")

            booking.status = BookingStatus.CANCELLED
            booking.cancelled_at = utcnow()
            booking.cancellation_reason = (reason or "").strip() or None
            BookingStore.update(booking)
            NotificationService.push(
                booking.user_id,
                "Booking Cancelled",
                f"Your booking #{booking.booking_number} has been cancelled.",
            )
        return ServiceResult.ok(booking, "Booking cancelled successfully")

    @staticmethod
    @service_operation
    def update_status(actor, booking_id, status, notes=None):
        # Deliberately permissive: admins may move a booking to any status here.
        # The guarded transitions live in approve/reject/cancel.
        require_role(actor, ADMIN_ROLES)
        status = (status or "").strip().lower()
        if status not in BookingStatus.ALL:
            raise ValidationError("Invalid booking status.")

        with transaction():
            booking = BookingService._get_booking(booking_id)
            now = utcnow()
            booking.status = status
            if notes:
                booking.notes = notes
            if status == BookingStatus.IN_PROGRESS and booking.actual_pickup_time is None:
                booking.actual_pickup_time = now
            elif status == BookingStatus.COMPLETED and booking.actual_return_time is None:
                booking.actual_return_time = now
            elif status in BookingStatus.NON_BLOCKING and booking.cancelled_at is None:
                booking.cancelled_at = now
            BookingStore.update(booking)
        return ServiceResult.ok(booking, "Booking status updated successfully")

    @staticmethod
    @service_operation
    def get_booking(actor, booking_id):
        booking = BookingService._get_booking(booking_id)
        BookingService._ensure_owner_or_admin(actor, booking)
        return ServiceResult.ok(BookingService.to_details(booking))

    @staticmethod
    @service_operation
    def track_booking(actor, booking_number):
        booking = BookingStore.get_by_number((booking_number or "").strip().upper())
        if booking is None:
            raise NotFoundError("Booking not found.")
        BookingService._ensure_owner_or_admin(actor, booking)
        return ServiceResult.ok(BookingService.to_details(booking))

    @staticmethod
    @service_operation
    def list_user_bookings(user_id):
        return ServiceResult.ok([BookingService.to_summary(b) for b in BookingStore.list_for_user(user_id)])

    @staticmethod
    @service_operation
    def list_bookings(actor, status=None, page=1, per_page=20):
        require_role(actor, ADMIN_ROLES)
        status = (status or "").strip().lower() or None
        if status is not None and status not in BookingStatus.ALL:
            raise ValidationError("Invalid booking status.")
        pagination = BookingStore.paginate(status=status, page=page, per_page=per_page)
        return ServiceResult.ok(
            {
                "items": [BookingService.to_summary(b) for b in pagination.items],
                "page": pagination.page,
                "per_page": pagination.per_page,
                "total": pagination.total,
                "pages": pagination.pages,
            }
        )

    @staticmethod
    def to_summary(booking):
        car = CarStore.get(booking.car_id)
        pickup = LocationStore.get(booking.pickup_location_id)
        dropoff = LocationStore.get(booking.return_location_id)
        payment = PaymentStore.find_for_booking(booking.id)

        driver_name = None
        driver = DriverStore.get(booking.assigned_driver_id)
        if driver is not None:
            driver_user = UserStore.get(driver.user_id)
            driver_name = driver_user.full_name if driver_user else None

        return {
            "id": booking.id,
            "booking_number": booking.booking_number,
            "status": booking.status,
            "start_date": booking.start_date.isoformat(),
            "end_date": booking.end_date.isoformat(),
            "total_days": booking.total_days,
            "total_amount": str(booking.total_amount),
            "created_at": booking.created_at.isoformat(),
            "car_id": booking.car_id,
            "car_name": car.display_name if car else None,
            "car_image_url": car.main_image_url if car else None,
            "pickup_location_name": pickup.name if pickup else None,
            "return_location_name": dropoff.name if dropoff else None,
            "driver_name": driver_name,
            "is_paid": payment is not None and payment.status == PaymentStatus.COMPLETED,
            "payment_status": payment.status if payment else None,
        }

    @staticmethod
    def to_details(booking):
        details = BookingService.to_summary(booking)
        details.update(
            {
                "price_per_day": str(booking.price_per_day),
                "sub_total": str(booking.sub_total),
                "driver_cost": str(booking.driver_cost),
                "insurance_cost": str(booking.insurance_cost),
                "gps_cost": str(booking.gps_cost),
                "child_seat_cost": str(booking.child_seat_cost),
                "additional_drivers_cost": str(booking.additional_drivers_cost),
                "tax_amount": str(booking.tax_amount),
                "discount_amount": str(booking.discount_amount),
                "deposit_amount": str(booking.deposit_amount),
                "needs_driver": booking.needs_driver,
                "with_insurance": booking.with_insurance,
                "with_gps": booking.with_gps,
                "with_child_seat": booking.with_child_seat,
                "additional_drivers": booking.additional_drivers,
                "contact_phone": booking.contact_phone,
                "contact_email": booking.contact_email,
                "notes": booking.notes,
                "cancellation_reason": booking.cancellation_reason,
                "cancelled_at": booking.cancelled_at.isoformat() if booking.cancelled_at else None,
                "actual_pickup_time": booking.actual_pickup_time.isoformat() if booking.actual_pickup_time else None,
                "actual_return_time": booking.actual_return_time.isoformat() if booking.actual_return_time else None,
            }
        )
        payment = PaymentStore.find_for_booking(booking.id)
        details["payment"] = payment.to_dict() if payment else None
        return details
