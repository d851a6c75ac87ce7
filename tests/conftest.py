import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["NOTIFICATIONS_ENABLED"] = "false"

from datetime import date, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from clinic_booking import models  # noqa: E402,F401
from clinic_booking.clock import FixedClock  # noqa: E402
from clinic_booking.database import Base, create_db_engine, get_db  # noqa: E402
from clinic_booking.domain.appointments.repository import AppointmentRepository  # noqa: E402
from clinic_booking.domain.appointments.schemas import AppointmentForm  # noqa: E402
from clinic_booking.domain.appointments.service import BookingService  # noqa: E402
from clinic_booking.services.notification_channel import InMemoryNotificationChannel  # noqa: E402
from clinic_booking.services.reminder_scheduler import ReminderScheduler  # noqa: E402

NOW = datetime(2026, 10, 19, 10, 0)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


@pytest.fixture
def engine():
    db_engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def channel():
    return InMemoryNotificationChannel()


@pytest.fixture
def reminders(channel, clock):
    return ReminderScheduler(channel, clock)


@pytest.fixture
def repo(db):
    return AppointmentRepository(db)


@pytest.fixture
def service(repo, reminders, clock):
    return BookingService(repo, reminders, clock)


@pytest.fixture
def make_form():
    def _make(
        name: str = "Jo",
        contact: str = "5551234567",
        day: date = TOMORROW,
        time: str = "09:00",
        reason: str = "Checkup",
    ) -> AppointmentForm:
        return AppointmentForm(name=name, contact=contact, date=day, time=time, reason=reason)

    return _make


@pytest.fixture
def client(session_factory, clock, channel):
    from clinic_booking.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # Lifespan is not entered, so the state it would set is provided here
    app.state.clock = clock
    app.state.notification_channel = channel
    yield TestClient(app)
    app.dependency_overrides.clear()
