from datetime import date

import pytest

from carrental.extensions import db
from carrental.models import BookingStatus, CarStatus
from carrental.services import AvailabilityChecker
from carrental.stores import BookingStore

JUNE_1 = date(2030, 6, 1)
JUNE_3 = date(2030, 6, 3)


@pytest.mark.parametrize(
    "start, end",
    [
        (date(2030, 6, 3), date(2030, 6, 5)),
        (date(2030, 5, 28), date(2030, 6, 1)),
        (date(2030, 6, 2), date(2030, 6, 2)),
        (date(2030, 5, 1), date(2030, 7, 1)),
        (JUNE_1, JUNE_3),
    ],
)
def test_intersecting_ranges_overlap(make_booking, car, start, end):
    make_booking(JUNE_1, JUNE_3)

    assert AvailabilityChecker.is_overlapping(car.id, start, end) is True
    assert AvailabilityChecker.is_available(car.id, start, end) is False


@pytest.mark.parametrize(
    "start, end",
    [
        (date(2030, 6, 4), date(2030, 6, 6)),
        (date(2030, 5, 25), date(2030, 5, 31)),
    ],
)
def test_adjacent_ranges_do_not_overlap(make_booking, car, start, end):
    make_booking(JUNE_1, JUNE_3)

    assert AvailabilityChecker.is_overlapping(car.id, start, end) is False


@pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.REJECTED])
def test_cancelled_and_rejected_bookings_release_the_car(make_booking, car, status):
    make_booking(JUNE_1, JUNE_3, status=status)

    assert AvailabilityChecker.is_available(car.id, JUNE_1, JUNE_3) is True


@pytest.mark.parametrize(
    "status",
    [BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED],
)
def test_live_and_finished_bookings_hold_the_car(make_booking, car, status):
    make_booking(JUNE_1, JUNE_3, status=status)

    assert AvailabilityChecker.is_available(car.id, JUNE_1, JUNE_3) is False


def test_booking_can_be_excluded_from_its_own_check(make_booking, car):
    booking = make_booking(JUNE_1, JUNE_3)

    assert AvailabilityChecker.is_overlapping(car.id, JUNE_1, JUNE_3, exclude_booking_id=booking.id) is False


def test_other_cars_are_not_affected(make_booking, make_car):
    make_booking(JUNE_1, JUNE_3)
    other = make_car()

    assert AvailabilityChecker.is_available(other.id, JUNE_1, JUNE_3) is True


def test_soft_deleted_bookings_are_ignored(make_booking, car):
    booking = make_booking(JUNE_1, JUNE_3)
    BookingStore.delete(booking)
    db.session.commit()

    assert AvailabilityChecker.is_available(car.id, JUNE_1, JUNE_3) is True


def test_available_cars_skips_held_and_unbookable_cars(make_booking, car, make_car):
    free = make_car()
    make_car(status=CarStatus.MAINTENANCE)
    make_car(is_available_for_booking=False)
    released = make_car()
    make_booking(JUNE_1, JUNE_3)
    make_booking(JUNE_1, JUNE_3, status=BookingStatus.CANCELLED, car_id=released.id)

    available = AvailabilityChecker.available_cars(date(2030, 6, 3), date(2030, 6, 5))

    assert [c.id for c in available] == [free.id, released.id]


def test_available_cars_outside_booked_range(make_booking, car):
    make_booking(JUNE_1, JUNE_3)

    assert [c.id for c in AvailabilityChecker.available_cars(date(2030, 6, 4), date(2030, 6, 4))] == [car.id]
