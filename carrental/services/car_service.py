from carrental.errors import NotFoundError, ValidationError
from carrental.pricing import parse_date, parse_id
from carrental.results import ServiceResult, service_operation
from carrental.services.availability import AvailabilityChecker
from carrental.stores import CarStore


class CarService:
    @staticmethod
    def _date_range(start_date, end_date):
        start = parse_date(start_date, "Start date")
        end = parse_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must not be before start date.")
        return start, end

    @staticmethod
    @service_operation
    def check_availability(car_id, start_date, end_date):
        car_id = parse_id(car_id, "Car selection")
        start, end = CarService._date_range(start_date, end_date)
        if CarStore.get(car_id) is None:
            raise NotFoundError("Car not found.")
        return ServiceResult.ok(
            {
                "car_id": car_id,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "is_available": AvailabilityChecker.is_available(car_id, start, end),
            }
        )

    @staticmethod
    @service_operation
    def list_available(start_date, end_date):
        start, end = CarService._date_range(start_date, end_date)
        return ServiceResult.ok([car.to_dict() for car in AvailabilityChecker.available_cars(start, end)])
