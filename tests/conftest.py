import itertools
from datetime import date
from decimal import Decimal

import pytest

from carrental import create_app
from carrental.extensions import db
from carrental.models import Booking, BookingStatus, Car, Location, User
from carrental.pricing import RentalRequest
from carrental.services.payment_gateway import GatewayResult, PaymentGateway
from carrental.stores import BookingStore, CarStore, LocationStore, UserStore


class FakeGateway(PaymentGateway):
    name = "fake"

    def __init__(self, success=True, failure_reason="Card declined"):
        self.success = success
        self.failure_reason = failure_reason
        self.requests = []

    def charge(self, request):
        self.requests.append(request)
        if self.success:
            return GatewayResult(success=True, raw_response='{"status": "success"}')
        return GatewayResult(success=False, failure_reason=self.failure_reason, raw_response='{"status": "failed"}')


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(gateway):
    app = create_app("testing", gateway=gateway)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(role="customer", **overrides):
        n = next(counter)
        user = User(
            external_subject=f"idp|{role}-{n}",
            full_name=f"Test {role.title()} {n}",
            email=f"{role}{n}@example.com",
            phone="+994501234567",
            role=role,
            is_active_user=True,
        )
        for key, value in overrides.items():
            setattr(user, key, value)
        UserStore.insert(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def other_customer(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


@pytest.fixture
def location(app):
    location = Location(name="Baku Airport", address="Heydar Aliyev International Airport", city="Baku")
    LocationStore.insert(location)
    db.session.commit()
    return location


@pytest.fixture
def make_car(app):
    counter = itertools.count(1)

    def _make(price="50.00", discount="0", deposit="200.00", **overrides):
        n = next(counter)
        car = Car(
            brand="Toyota",
            model="Corolla",
            year=2022,
            license_plate=f"10-AA-{n:03d}",
            price_per_day=Decimal(price),
            discount_percentage=Decimal(discount),
            deposit_amount=Decimal(deposit),
        )
        for key, value in overrides.items():
            setattr(car, key, value)
        CarStore.insert(car)
        db.session.commit()
        return car

    return _make


@pytest.fixture
def car(make_car):
    return make_car()


@pytest.fixture
def rental_request(car, location):
    def _make(start=date(2030, 6, 1), end=date(2030, 6, 3), **overrides):
        fields = {
            "car_id": car.id,
            "start_date": start,
            "end_date": end,
            "pickup_location_id": location.id,
            "return_location_id": location.id,
            "with_insurance": False,
            "contact_phone": "+994501234567",
            "contact_email": "renter@example.com",
        }
        fields.update(overrides)
        return RentalRequest(**fields)

    return _make


@pytest.fixture
def make_booking(app, customer, car, location):
    counter = itertools.count(1)

    def _make(start, end, status=BookingStatus.PENDING, car_id=None, user=None):
        days = (end - start).days + 1
        booking = Booking(
            user_id=(user or customer).id,
            car_id=car_id or car.id,
            booking_number=f"BKTEST{next(counter):06d}",
            start_date=start,
            end_date=end,
            total_days=days,
            price_per_day=Decimal("50.00"),
            sub_total=Decimal("50.00") * days,
            tax_amount=Decimal("9.00") * days,
            total_amount=Decimal("59.00") * days,
            pickup_location_id=location.id,
            return_location_id=location.id,
            status=status,
            contact_phone="+994501234567",
            contact_email="renter@example.com",
        )
        BookingStore.insert(booking)
        db.session.commit()
        return booking

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"X-Identity-Subject": user.external_subject}

    return _headers
