"""
Pytest configuration file.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from venue_booking.core.database import Base, get_db
from venue_booking.models.venue import Venue, VenueType
from venue_booking.models.club import Club
from venue_booking.models.booking import Booking, BookingStatus
from venue_booking.models import audit_log, notification  # noqa: F401
from venue_booking.models.venue_block import VenueBlock, BlockType
from main import app
from datetime import date, time, timedelta
import uuid

SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# A weekday well inside every venue's advance-booking window.
BOOKING_DAY = date.today() + timedelta(days=7)
while BOOKING_DAY.weekday() >= 5:
    BOOKING_DAY += timedelta(days=1)


def override_get_db():
    """Override database dependency for testing."""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


def actor_headers(actor_id: str, role: str, name: str = "Test Actor") -> dict:
    return {"X-Actor-Id": actor_id, "X-Actor-Role": role, "X-Actor-Name": name}


@pytest.fixture(scope="function")
def db():
    """Create test database."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create test client."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return actor_headers("admin-1", "admin", "Test Admin")


@pytest.fixture
def sample_club(db):
    """Create a sample active club."""
    club = Club(
        id=str(uuid.uuid4()),
        name="Coding Club",
        department="CSE",
        faculty_coordinator="Dr. Rao",
        contact_email="coding@college.edu",
        contact_phone="9876543210",
        is_active=True
    )
    db.add(club)
    db.commit()
    db.refresh(club)
    return club


@pytest.fixture
def other_club(db):
    """Create a second club."""
    club = Club(
        id=str(uuid.uuid4()),
        name="Music Club",
        department="ECE",
        is_active=True
    )
    db.add(club)
    db.commit()
    db.refresh(club)
    return club


@pytest.fixture
def club_headers(sample_club):
    return actor_headers(sample_club.id, "club", sample_club.name)


@pytest.fixture
def sample_venue(db):
    """Create a sample seminar hall."""
    venue = Venue(
        id=str(uuid.uuid4()),
        name="Seminar Hall A",
        venue_type=VenueType.SEMINAR_HALL,
        department="CSE",
        location="Main Block, 2nd Floor",
        capacity=120,
        faculty_in_charge="Prof. Iyer",
        faculty_contact="+91 98765 43210",
        features=["Projector", "Mic", "AC"],
        is_active=True,
        maintenance_mode=False,
        max_advance_booking_days=90,
        min_advance_booking_hours=24,
        allow_weekend_bookings=True
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


@pytest.fixture
def computer_center(db):
    """Create a sample computer center."""
    venue = Venue(
        id=str(uuid.uuid4()),
        name="Computer Center 1",
        venue_type=VenueType.COMPUTER_CENTER,
        department="IT PARK",
        capacity=60,
        features=["Projector", "AC"],
        is_active=True,
        maintenance_mode=False,
        max_advance_booking_days=90,
        min_advance_booking_hours=24,
        allow_weekend_bookings=True
    )
    db.add(venue)
    db.commit()
    db.refresh(venue)
    return venue


def make_booking(db, venue, club, start, end, status=BookingStatus.APPROVED, day=None, event_name="Hackathon Prep"):
    day = day or BOOKING_DAY
    booking = Booking(
        id=str(uuid.uuid4()),
        venue_id=venue.id,
        club_id=club.id,
        event_name=event_name,
        faculty_in_charge="Dr. Rao",
        department="CSE",
        mobile_number="9876543210",
        participants=50,
        from_date=day,
        to_date=day,
        from_time=start,
        to_time=end,
        status=status
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.fixture
def approved_booking(db, sample_venue, sample_club):
    """An approved 09:00-11:00 booking on the booking day."""
    return make_booking(db, sample_venue, sample_club, time(9, 0), time(11, 0))


@pytest.fixture
def pending_booking(db, sample_venue, sample_club):
    """A pending 14:00-16:00 booking on the booking day."""
    return make_booking(
        db, sample_venue, sample_club, time(14, 0), time(16, 0),
        status=BookingStatus.PENDING, event_name="Guest Lecture"
    )


@pytest.fixture
def booking_payload(sample_venue, sample_club):
    def build(**overrides):
        payload = {
            "venueId": sample_venue.id,
            "clubId": sample_club.id,
            "eventName": "Intro to Rust Workshop",
            "eventType": "Workshop",
            "facultyInCharge": "Dr. Rao",
            "department": "CSE",
            "mobileNumber": "9876543210",
            "participants": 80,
            "fromDate": BOOKING_DAY.isoformat(),
            "toDate": BOOKING_DAY.isoformat(),
            "fromTime": "12:00",
            "toTime": "13:00",
            "logistics": ["Mic", "Projector"],
        }
        payload.update(overrides)
        return payload
    return build


def make_block(db, venue, start, end, block_type=BlockType.MAINTENANCE, day=None, reason="AC servicing"):
    day = day or BOOKING_DAY
    block = VenueBlock(
        id=str(uuid.uuid4()),
        venue_id=venue.id,
        from_date=day,
        to_date=day,
        from_time=start,
        to_time=end,
        block_type=block_type,
        reason=reason,
        created_by="admin-1"
    )
    db.add(block)
    db.commit()
    db.refresh(block)
    return block
