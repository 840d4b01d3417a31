"""
Venue management and availability API tests.
"""
from fastapi import status
from datetime import time
from venue_booking.models.booking import BookingStatus
from venue_booking.models.audit_log import AuditLog, AuditAction
from venue_booking.models.venue_block import VenueBlock
from conftest import BOOKING_DAY, make_block, make_booking


def window_params(from_time, to_time, day=None):
    day = (day or BOOKING_DAY).isoformat()
    return {"fromDate": day, "toDate": day, "fromTime": from_time, "toTime": to_time}


# =============================================================================
# TEST: Venue CRUD
# =============================================================================
class TestVenueManagement:
    """Test venue listing and admin management."""

    def test_list_venues(self, client, sample_venue, computer_center):
        response = client.get("/api/venues")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert [v["name"] for v in data["venues"]] == ["Computer Center 1", "Seminar Hall A"]
        assert data["pagination"]["totalItems"] == 2

    def test_filter_by_type_and_department(self, client, sample_venue, computer_center):
        response = client.get("/api/venues?venueType=cc")
        assert [v["id"] for v in response.json()["venues"]] == [computer_center.id]

        response = client.get("/api/venues?department=cse")
        assert [v["id"] for v in response.json()["venues"]] == [sample_venue.id]

    def test_invalid_venue_type_filter(self, client):
        response = client.get("/api/venues?venueType=stadium")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_get_venue(self, client, sample_venue):
        response = client.get(f"/api/venues/{sample_venue.id}")

        assert response.status_code == status.HTTP_200_OK
        venue = response.json()["venue"]
        assert venue["venueType"] == "seminar"
        assert venue["features"] == ["Projector", "Mic", "AC"]
        assert venue["bookingRules"]["maxAdvanceBookingDays"] == 90

    def test_get_missing_venue(self, client):
        response = client.get("/api/venues/unknown")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_admin_creates_venue(self, client, admin_headers):
        payload = {
            "name": "Maharaja Hall",
            "venueType": "maharaja",
            "department": "Central",
            "capacity": 800,
            "facultyContact": "+91 98450-12345",
            "features": ["Stage", "Sound System"],
            "bookingRules": {
                "maxAdvanceBookingDays": 60,
                "minAdvanceBookingHours": 48,
                "allowWeekendBookings": False,
                "opensAt": "08:00",
                "closesAt": "20:00"
            }
        }

        response = client.post("/api/venues", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_201_CREATED
        venue = response.json()["venue"]
        assert venue["isActive"] is True
        assert venue["bookingRules"]["opensAt"] == "08:00"
        assert venue["bookingRules"]["allowWeekendBookings"] is False

    def test_club_cannot_create_venue(self, client, club_headers):
        payload = {"name": "Pop-up Hall", "venueType": "other", "department": "CSE", "capacity": 20}

        response = client.post("/api/venues", json=payload, headers=club_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_venue_with_bad_hours(self, client, admin_headers):
        payload = {
            "name": "Night Lab",
            "venueType": "cc",
            "department": "CSE",
            "capacity": 30,
            "bookingRules": {"opensAt": "18:00", "closesAt": "09:00"}
        }

        response = client.post("/api/venues", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_create_venue_with_bad_contact(self, client, admin_headers):
        payload = {
            "name": "Seminar Hall B",
            "venueType": "seminar",
            "department": "ECE",
            "capacity": 100,
            "facultyContact": "call reception"
        }

        response = client.post("/api/venues", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_update_venue(self, client, admin_headers, sample_venue):
        response = client.put(
            f"/api/venues/{sample_venue.id}",
            json={"capacity": 150, "bookingRules": {"maxBookingDurationHours": 6}},
            headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        venue = response.json()["venue"]
        assert venue["capacity"] == 150
        assert venue["bookingRules"]["maxBookingDurationHours"] == 6

    def test_partial_rules_update_keeps_other_rules(self, client, admin_headers):
        payload = {
            "name": "Open Air Theatre",
            "venueType": "other",
            "department": "Central",
            "capacity": 400,
            "bookingRules": {
                "maxAdvanceBookingDays": 30,
                "minAdvanceBookingHours": 12,
                "opensAt": "08:00",
                "closesAt": "20:00"
            }
        }
        venue_id = client.post("/api/venues", json=payload, headers=admin_headers).json()["venue"]["id"]

        response = client.put(
            f"/api/venues/{venue_id}",
            json={"bookingRules": {"allowWeekendBookings": False}},
            headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        rules = response.json()["venue"]["bookingRules"]
        assert rules["allowWeekendBookings"] is False
        assert rules["maxAdvanceBookingDays"] == 30
        assert rules["minAdvanceBookingHours"] == 12
        assert rules["opensAt"] == "08:00"
        assert rules["closesAt"] == "20:00"

    def test_closing_time_before_stored_opening_time(self, client, db, admin_headers, sample_venue):
        sample_venue.opens_at = time(9, 0)
        db.commit()

        response = client.put(
            f"/api/venues/{sample_venue.id}",
            json={"bookingRules": {"closesAt": "08:00"}},
            headers=admin_headers
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_maintenance_mode_toggles_active_flag(self, client, admin_headers, sample_venue):
        response = client.put(
            f"/api/venues/{sample_venue.id}/maintenance",
            json={"maintenanceMode": True, "reason": "Projector replacement"},
            headers=admin_headers
        )

        venue = response.json()["venue"]
        assert venue["maintenanceMode"] is True
        assert venue["isActive"] is False
        assert venue["maintenanceReason"] == "Projector replacement"

        response = client.put(
            f"/api/venues/{sample_venue.id}/maintenance",
            json={"maintenanceMode": False},
            headers=admin_headers
        )

        venue = response.json()["venue"]
        assert venue["maintenanceMode"] is False
        assert venue["isActive"] is True
        assert venue["maintenanceReason"] is None


# =============================================================================
# TEST: Availability preview
# =============================================================================
class TestVenueAvailability:
    """Test the advisory availability endpoints."""

    def test_free_slot(self, client, sample_venue, approved_booking):
        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("11:00", "12:00")
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["available"] is True
        assert data["conflict"] is None

    def test_conflicting_slot_reports_booking(self, client, sample_venue, approved_booking):
        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("10:00", "12:00")
        )

        data = response.json()
        assert data["available"] is False
        assert data["conflict"]["bookingId"] == approved_booking.id
        assert data["conflict"]["start"] == f"{BOOKING_DAY.isoformat()} 09:00"
        assert data["conflict"]["end"] == f"{BOOKING_DAY.isoformat()} 11:00"

    def test_earliest_conflict_is_reported(self, client, db, sample_venue, sample_club, approved_booking):
        make_booking(db, sample_venue, sample_club, time(12, 0), time(13, 0), event_name="Quiz")

        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("08:00", "18:00")
        )

        assert response.json()["conflict"]["bookingId"] == approved_booking.id

    def test_cancelled_booking_does_not_block(self, client, db, sample_venue, sample_club):
        make_booking(db, sample_venue, sample_club, time(9, 0), time(11, 0), status=BookingStatus.CANCELLED)

        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("09:00", "11:00")
        )

        assert response.json()["available"] is True

    def test_invalid_window(self, client, sample_venue):
        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("11:00", "10:00")
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_venue_in_maintenance_is_unavailable(self, client, admin_headers, sample_venue):
        client.put(
            f"/api/venues/{sample_venue.id}/maintenance",
            json={"maintenanceMode": True},
            headers=admin_headers
        )

        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("09:00", "10:00")
        )

        assert response.json()["available"] is False
        assert response.json()["conflict"] is None

    def test_available_venues_excludes_booked_ones(self, client, sample_venue, computer_center, approved_booking):
        response = client.get("/api/venues/available", params=window_params("10:00", "11:00"))

        assert response.status_code == status.HTTP_200_OK
        assert [v["id"] for v in response.json()["venues"]] == [computer_center.id]

    def test_available_venues_by_capacity(self, client, sample_venue, computer_center):
        params = window_params("10:00", "11:00")
        params["minCapacity"] = 100

        response = client.get("/api/venues/available", params=params)

        assert [v["id"] for v in response.json()["venues"]] == [sample_venue.id]

    def test_available_venues_with_invalid_window(self, client, sample_venue):
        response = client.get("/api/venues/available", params=window_params("10:00", "10:00"))

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# =============================================================================
# TEST: Venue blocks
# =============================================================================
class TestVenueBlocks:
    """Test admin blocks on venue slots."""

    def test_admin_blocks_slot(self, client, admin_headers, sample_venue):
        payload = window_params("09:00", "17:00")
        payload.update(blockType="holiday", reason="Founders Day")

        response = client.post(f"/api/venues/{sample_venue.id}/blocks", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["overlappingBookingIds"] == []
        block = data["blocks"][0]
        assert block["venueId"] == sample_venue.id
        assert block["blockType"] == "holiday"
        assert block["fromTime"] == "09:00"
        assert block["createdBy"] == "admin-1"

    def test_club_cannot_block_slot(self, client, club_headers, sample_venue):
        response = client.post(
            f"/api/venues/{sample_venue.id}/blocks",
            json=window_params("09:00", "17:00"),
            headers=club_headers
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_block_unknown_venue(self, client, admin_headers):
        response = client.post("/api/venues/missing/blocks", json=window_params("09:00", "10:00"), headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_block_with_inverted_window(self, client, admin_headers, sample_venue):
        response = client.post(
            f"/api/venues/{sample_venue.id}/blocks",
            json=window_params("17:00", "09:00"),
            headers=admin_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_duplicate_block_conflicts(self, client, admin_headers, db, sample_venue):
        make_block(db, sample_venue, time(9, 0), time(17, 0))

        response = client.post(
            f"/api/venues/{sample_venue.id}/blocks",
            json=window_params("09:00", "17:00"),
            headers=admin_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_block_reports_overlapping_bookings(self, client, admin_headers, sample_venue, approved_booking, pending_booking):
        response = client.post(
            f"/api/venues/{sample_venue.id}/blocks",
            json=window_params("10:00", "12:00"),
            headers=admin_headers
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["overlappingBookingIds"] == [approved_booking.id]

    def test_bulk_block(self, client, admin_headers, db, sample_venue):
        payload = {"blocks": [
            dict(window_params("09:00", "10:00"), blockType="maintenance"),
            dict(window_params("15:00", "16:00"), blockType="event", reason="Convocation rehearsal"),
        ]}

        response = client.post(f"/api/venues/{sample_venue.id}/blocks/bulk", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.json()["blocks"]) == 2
        assert db.query(VenueBlock).filter(VenueBlock.venue_id == sample_venue.id).count() == 2

    def test_bulk_block_with_repeated_window_stores_nothing(self, client, admin_headers, db, sample_venue):
        payload = {"blocks": [window_params("09:00", "10:00"), window_params("09:00", "10:00")]}

        response = client.post(f"/api/venues/{sample_venue.id}/blocks/bulk", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert db.query(VenueBlock).count() == 0

    def test_bulk_block_needs_at_least_one_block(self, client, admin_headers, sample_venue):
        response = client.post(
            f"/api/venues/{sample_venue.id}/blocks/bulk",
            json={"blocks": []},
            headers=admin_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_list_blocks(self, client, db, sample_venue, computer_center):
        make_block(db, sample_venue, time(15, 0), time(16, 0))
        make_block(db, sample_venue, time(9, 0), time(10, 0))
        make_block(db, computer_center, time(9, 0), time(10, 0))

        response = client.get(f"/api/venues/{sample_venue.id}/blocks")

        assert response.status_code == status.HTTP_200_OK
        assert [b["fromTime"] for b in response.json()["blocks"]] == ["09:00", "15:00"]

    def test_list_blocks_with_bad_date(self, client, sample_venue):
        response = client.get(f"/api/venues/{sample_venue.id}/blocks", params={"fromDate": "15-02-2025"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_preview_reports_block(self, client, db, sample_venue):
        block = make_block(db, sample_venue, time(9, 0), time(12, 0))

        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("10:00", "11:00")
        )

        data = response.json()
        assert data["available"] is False
        assert data["conflict"]["blockId"] == block.id
        assert data["conflict"]["bookingId"] is None
        assert data["conflict"]["eventName"] == "AC servicing"

    def test_slot_after_block_is_available(self, client, db, sample_venue):
        make_block(db, sample_venue, time(9, 0), time(12, 0))

        response = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("12:00", "13:00")
        )

        assert response.json()["available"] is True

    def test_available_venues_excludes_blocked_ones(self, client, db, sample_venue, computer_center):
        make_block(db, computer_center, time(9, 0), time(17, 0))

        response = client.get("/api/venues/available", params=window_params("10:00", "11:00"))

        assert [v["id"] for v in response.json()["venues"]] == [sample_venue.id]

    def test_admin_removes_block(self, client, db, admin_headers, sample_venue):
        block = make_block(db, sample_venue, time(9, 0), time(12, 0))
        block_id = block.id

        response = client.delete(f"/api/venues/{sample_venue.id}/blocks/{block_id}", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        db.expire_all()
        assert db.query(VenueBlock).filter(VenueBlock.id == block_id).first() is None
        actions = [log.action for log in db.query(AuditLog).filter(AuditLog.target_id == sample_venue.id)]
        assert actions == [AuditAction.VENUE_UNBLOCKED]

        availability = client.post(
            f"/api/venues/{sample_venue.id}/availability",
            json=window_params("10:00", "11:00")
        )
        assert availability.json()["available"] is True

    def test_remove_block_through_other_venue(self, client, db, admin_headers, sample_venue, computer_center):
        block = make_block(db, sample_venue, time(9, 0), time(12, 0))

        response = client.delete(f"/api/venues/{computer_center.id}/blocks/{block.id}", headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_club_cannot_remove_block(self, client, db, club_headers, sample_venue):
        block = make_block(db, sample_venue, time(9, 0), time(12, 0))

        response = client.delete(f"/api/venues/{sample_venue.id}/blocks/{block.id}", headers=club_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_block_is_audited(self, client, db, admin_headers, sample_venue):
        response = client.post(
            f"/api/venues/{sample_venue.id}/blocks",
            json=dict(window_params("09:00", "10:00"), reason="Pest control"),
            headers=admin_headers
        )
        block_id = response.json()["blocks"][0]["id"]

        log = db.query(AuditLog).filter(AuditLog.action == AuditAction.VENUE_BLOCKED).one()
        assert log.target_id == sample_venue.id
        assert log.extra_metadata["blockId"] == block_id
        assert "Pest control" in log.details
