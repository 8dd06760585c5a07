from carrental.stores import BookingStore, CarStore


class AvailabilityChecker:
    @staticmethod
    def is_overlapping(car_id, start_date, end_date, exclude_booking_id=None):
        # Boundaries are inclusive: a rental ending on day N blocks one starting on day N.
        return BookingStore.exists_overlap(car_id, start_date, end_date, exclude_id=exclude_booking_id)

    @staticmethod
    def is_available(car_id, start_date, end_date, exclude_booking_id=None):
        return not AvailabilityChecker.is_overlapping(car_id, start_date, end_date, exclude_booking_id)

    @staticmethod
    def available_cars(start_date, end_date):
        """Bookable cars with no booking holding any day of the range."""
        held = BookingStore.held_car_ids(start_date, end_date)
        return [car for car in CarStore.list_bookable() if car.id not in held]
