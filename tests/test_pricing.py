from datetime import date, datetime
from decimal import Decimal

import pytest

from carrental.errors import ValidationError
from carrental.pricing import RateCard, RentalRequest, calculate


def make_request(start=date(2030, 6, 1), end=date(2030, 6, 3), **overrides):
    fields = {"car_id": 1, "start_date": start, "end_date": end, "with_insurance": False}
    fields.update(overrides)
    return RentalRequest(**fields)


def test_three_day_rental_without_add_ons():
    cost = calculate(make_request(), RateCard(price_per_day=Decimal("50")))

    assert cost.total_days == 3
    assert cost.sub_total == Decimal("150")
    assert cost.add_on_total == Decimal("0")
    assert cost.tax_amount == Decimal("27")
    assert cost.discount_amount == Decimal("0")
    assert cost.total_amount == Decimal("177")


def test_driver_and_insurance_are_charged_per_day():
    cost = calculate(make_request(needs_driver=True, with_insurance=True), RateCard(price_per_day=Decimal("50")))

    assert cost.driver_cost == Decimal("150")
    assert cost.insurance_cost == Decimal("30")
    assert cost.add_on_total == Decimal("180")
    assert cost.sub_total == Decimal("150")
    assert cost.tax_amount == Decimal("59.4")
    assert cost.total_amount == Decimal("389.4")


def test_same_day_rental_counts_as_one_day():
    day = date(2030, 6, 1)
    cost = calculate(make_request(start=day, end=day), RateCard(price_per_day=Decimal("80")))

    assert cost.total_days == 1
    assert cost.sub_total == Decimal("80")


def test_datetimes_are_priced_by_calendar_day():
    request = RentalRequest.from_payload(
        {"car_id": 1, "start_date": "2030-06-01T18:00:00", "end_date": "2030-06-02T09:00:00"}
    )

    assert request.total_days == 2


def test_all_add_ons_with_discount():
    request = make_request(
        start=date(2030, 6, 1),
        end=date(2030, 6, 2),
        needs_driver=True,
        with_insurance=True,
        with_gps=True,
        with_child_seat=True,
        additional_drivers=2,
    )
    cost = calculate(request, RateCard(price_per_day=Decimal("40"), discount_percentage=Decimal("10")))

    assert cost.driver_cost == Decimal("100")
    assert cost.insurance_cost == Decimal("20")
    assert cost.gps_cost == Decimal("10")
    assert cost.child_seat_cost == Decimal("6")
    assert cost.additional_drivers_cost == Decimal("40")
    assert cost.add_on_total == Decimal("176")
    assert cost.tax_amount == Decimal("46.08")
    assert cost.discount_amount == Decimal("25.60")
    assert cost.total_amount == Decimal("276.48")


def test_deposit_is_copied_from_rate_card():
    cost = calculate(make_request(), RateCard(price_per_day=Decimal("50"), deposit_amount=Decimal("300")))

    assert cost.deposit_amount == Decimal("300.00")
    assert cost.total_amount == Decimal("177")


@pytest.mark.parametrize("discount", ["0", "12.5", "37.5", "99.99", "100"])
def test_total_is_sum_of_components_and_never_negative(discount):
    request = make_request(needs_driver=True, with_gps=True, additional_drivers=1)
    cost = calculate(request, RateCard(price_per_day=Decimal("33.33"), discount_percentage=Decimal(discount)))

    assert cost.total_amount == cost.sub_total + cost.add_on_total + cost.tax_amount - cost.discount_amount
    assert cost.total_amount >= 0


def test_calculation_is_deterministic():
    request = make_request(with_child_seat=True)
    rate_card = RateCard(price_per_day=Decimal("45.50"), discount_percentage=Decimal("5"))

    assert calculate(request, rate_card) == calculate(request, rate_card)


def test_amounts_are_decimals():
    cost = calculate(make_request(), RateCard(price_per_day=Decimal("19.99")))

    assert isinstance(cost.total_amount, Decimal)
    assert cost.to_dict()["total_amount"] == str(cost.total_amount)


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        make_request(start=date(2030, 6, 5), end=date(2030, 6, 1)).validate()


def test_negative_additional_drivers_are_rejected():
    with pytest.raises(ValidationError):
        make_request(additional_drivers=-1).validate()


def test_payload_parsing():
    request = RentalRequest.from_payload(
        {
            "car_id": "7",
            "start_date": "2030-06-01",
            "end_date": "2030-06-04",
            "pickup_location_id": 2,
            "return_location_id": 3,
            "with_gps": True,
            "additional_drivers": "1",
            "contact_email": " Renter@Example.com ",
        }
    )

    assert request.car_id == 7
    assert request.start_date == date(2030, 6, 1)
    assert request.end_date == date(2030, 6, 4)
    assert request.with_insurance is True
    assert request.with_gps is True
    assert request.additional_drivers == 1
    assert request.contact_email == "renter@example.com"


@pytest.mark.parametrize(
    "payload",
    [
        {"start_date": "2030-06-01", "end_date": "2030-06-02"},
        {"car_id": 1, "end_date": "2030-06-02"},
        {"car_id": 1, "start_date": "not-a-date", "end_date": "2030-06-02"},
        {"car_id": 1, "start_date": "2030-06-01", "end_date": "2030-06-02", "additional_drivers": "two"},
        {"car_id": 1, "start_date": "2030-06-01", "end_date": "2030-06-02", "additional_drivers": 1.5},
        {"car_id": 1, "start_date": "2030-06-01", "end_date": "2030-06-02", "additional_drivers": "1.5"},
        {"car_id": 1.5, "start_date": "2030-06-01", "end_date": "2030-06-02"},
        {"car_id": 1, "start_date": "2030-06-01", "end_date": "2030-06-02", "needs_driver": "false"},
        {"car_id": 1, "start_date": "2030-06-01", "end_date": "2030-06-02", "with_insurance": "false"},
        {"car_id": 1, "start_date": "2030-06-01", "end_date": "2030-06-02", "with_gps": 1},
    ],
)
def test_invalid_payloads_raise_validation_error(payload):
    with pytest.raises(ValidationError):
        RentalRequest.from_payload(payload)


def test_booking_requires_contact_details():
    request = make_request(pickup_location_id=1, return_location_id=1, contact_phone="call me", contact_email="x@y.az")
    with pytest.raises(ValidationError):
        request.validate_for_booking()


def test_from_payload_accepts_datetime_objects():
    request = RentalRequest.from_payload(
        {"car_id": 1, "start_date": datetime(2030, 1, 1, 10), "end_date": date(2030, 1, 1)}
    )

    assert request.total_days == 1


def test_json_false_switches_add_ons_off():
    request = RentalRequest.from_payload(
        {
            "car_id": 1,
            "start_date": "2030-06-01",
            "end_date": "2030-06-03",
            "needs_driver": False,
            "with_insurance": False,
            "additional_drivers": 2.0,
        }
    )
    cost = calculate(request, RateCard(price_per_day=Decimal("50")))

    assert request.needs_driver is False
    assert request.with_insurance is False
    assert request.additional_drivers == 2
    assert cost.driver_cost == Decimal("0")
    assert cost.insurance_cost == Decimal("0")
