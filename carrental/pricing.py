"""Rental cost calculation.

Everything here is pure: no database access and no clock, so the same
request and rate card always produce the same breakdown.
"""

import re
from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from carrental.errors import ValidationError

CENT = Decimal("0.01")

DRIVER_RATE = Decimal("50")
INSURANCE_RATE = Decimal("10")
GPS_RATE = Decimal("5")
CHILD_SEAT_RATE = Decimal("3")
ADDITIONAL_DRIVER_RATE = Decimal("10")
TAX_RATE = Decimal("0.18")

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def to_money(value):
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_date(value, label):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = (value or "").strip() if isinstance(value, str) else ""
    if not raw:
        raise ValidationError(f"{label} is required.")
    try:
        return datetime.fromisoformat(raw).date()
    except ValueError as exc:
        raise ValidationError(f"Invalid {label.lower()}.") from exc


def _whole_number(value):
    """Return ``value`` as an int, or None when it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        raw = value.strip()
        digits = raw[1:] if raw[:1] in "+-" else raw
        return int(raw) if digits.isdigit() else None
    return None


def parse_id(value, label):
    parsed = _whole_number(value)
    if parsed is None or parsed <= 0:
        raise ValidationError(f"{label} is required.")
    return parsed


def parse_count(value, label):
    if value is None or value == "":
        return 0
    parsed = _whole_number(value)
    if parsed is None:
        raise ValidationError(f"{label} must be a whole number.")
    return parsed


def parse_flag(value, default, label):
    # JSON booleans only.
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ValidationError(f"{label} must be true or false.")


@dataclass(frozen=True)
class RateCard:
    price_per_day: Decimal
    deposit_amount: Decimal = Decimal("0")
    discount_percentage: Decimal = Decimal("0")

    @classmethod
    def from_car(cls, car):
        return cls(
            price_per_day=Decimal(str(car.price_per_day)),
            deposit_amount=Decimal(str(car.deposit_amount or 0)),
            discount_percentage=Decimal(str(car.discount_percentage or 0)),
        )


@dataclass(frozen=True)
class RentalRequest:
    car_id: int
    start_date: date
    end_date: date
    pickup_location_id: Optional[int] = None
    return_location_id: Optional[int] = None
    needs_driver: bool = False
    with_insurance: bool = True
    with_gps: bool = False
    with_child_seat: bool = False
    additional_drivers: int = 0
    contact_phone: str = ""
    contact_email: str = ""
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, payload):
        pickup = payload.get("pickup_location_id")
        returning = payload.get("return_location_id")
        return cls(
            car_id=parse_id(payload.get("car_id"), "Car selection"),
            start_date=parse_date(payload.get("start_date"), "Start date"),
            end_date=parse_date(payload.get("end_date"), "End date"),
            pickup_location_id=parse_id(pickup, "Pickup location") if pickup is not None else None,
            return_location_id=parse_id(returning, "Return location") if returning is not None else None,
            needs_driver=parse_flag(payload.get("needs_driver"), False, "Driver option"),
            with_insurance=parse_flag(payload.get("with_insurance"), True, "Insurance option"),
            with_gps=parse_flag(payload.get("with_gps"), False, "GPS option"),
            with_child_seat=parse_flag(payload.get("with_child_seat"), False, "Child seat option"),
            additional_drivers=parse_count(payload.get("additional_drivers"), "Additional drivers"),
            contact_phone=(payload.get("contact_phone") or "").strip(),
            contact_email=(payload.get("contact_email") or "").strip().lower(),
            notes=(payload.get("notes") or "").strip() or None,
        )

    @property
    def total_days(self):
        return (self.end_date - self.start_date).days + 1

    def validate(self):
        if self.end_date < self.start_date:
            raise ValidationError("End date must not be before start date.")
        if self.additional_drivers < 0:
            raise ValidationError("Additional drivers cannot be negative.")
        return self

    def validate_for_booking(self):
        self.validate()
        if self.pickup_location_id is None:
            raise ValidationError("Pickup location is required.")
        if self.return_location_id is None:
            raise ValidationError("Return location is required.")
        if not PHONE_PATTERN.fullmatch(self.contact_phone):
            raise ValidationError("Invalid contact phone number.")
        if not EMAIL_PATTERN.fullmatch(self.contact_email):
            raise ValidationError("Invalid contact email.")
        return self


@dataclass(frozen=True)
class CostBreakdown:
    total_days: int
    price_per_day: Decimal
    sub_total: Decimal
    driver_cost: Decimal
    insurance_cost: Decimal
    gps_cost: Decimal
    child_seat_cost: Decimal
    additional_drivers_cost: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    deposit_amount: Decimal
    total_amount: Decimal

    @property
    def add_on_total(self):
        return (
            self.driver_cost
            + self.insurance_cost
            + self.gps_cost
            + self.child_seat_cost
            + self.additional_drivers_cost
        )

    def to_dict(self):
        payload = {key: str(value) if isinstance(value, Decimal) else value for key, value in asdict(self).items()}
        payload["add_on_total"] = str(self.add_on_total)
        return payload


def calculate(request, rate_card):
    """Price a rental. The caller guarantees ``start_date <= end_date``."""
    days = request.total_days
    day_count = Decimal(days)
    price_per_day = to_money(rate_card.price_per_day)
    sub_total = price_per_day * day_count

    driver_cost = DRIVER_RATE * day_count if request.needs_driver else Decimal("0")
    insurance_cost = INSURANCE_RATE * day_count if request.with_insurance else Decimal("0")
    gps_cost = GPS_RATE * day_count if request.with_gps else Decimal("0")
    child_seat_cost = CHILD_SEAT_RATE * day_count if request.with_child_seat else Decimal("0")
    additional_drivers_cost = Decimal(request.additional_drivers) * ADDITIONAL_DRIVER_RATE * day_count
    add_on_total = driver_cost + insurance_cost + gps_cost + child_seat_cost + additional_drivers_cost

    taxable = sub_total + add_on_total
    tax_amount = to_money(taxable * TAX_RATE)
    discount_amount = to_money(taxable * Decimal(str(rate_card.discount_percentage)) / Decimal("100"))

    return CostBreakdown(
        total_days=days,
        price_per_day=price_per_day,
        sub_total=to_money(sub_total),
        driver_cost=to_money(driver_cost),
        insurance_cost=to_money(insurance_cost),
        gps_cost=to_money(gps_cost),
        child_seat_cost=to_money(child_seat_cost),
        additional_drivers_cost=to_money(additional_drivers_cost),
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        deposit_amount=to_money(rate_card.deposit_amount),
        total_amount=to_money(sub_total + add_on_total + tax_amount - discount_amount),
    )
