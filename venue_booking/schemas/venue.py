from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import time
import re
from venue_booking.models.venue import VenueType

CONTACT_PATTERN = re.compile(r"^\+?[\d\s-]+$")


def _check_clock(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        time.fromisoformat(v)
    except ValueError:
        raise ValueError('Time must be in HH:MM format (24-hour)')
    return v


class BookingRules(BaseModel):
    maxAdvanceBookingDays: Optional[int] = Field(90, ge=1)
    minAdvanceBookingHours: Optional[int] = Field(24, ge=0)
    maxBookingDurationHours: Optional[int] = Field(None, ge=1)
    allowWeekendBookings: bool = True
    opensAt: Optional[str] = Field(None, description="Opening time in HH:MM format (24-hour)")
    closesAt: Optional[str] = Field(None, description="Closing time in HH:MM format (24-hour)")
    
    @validator('opensAt', 'closesAt')
    def validate_clock(cls, v):
        return _check_clock(v)
    
    @validator('closesAt')
    def validate_closes_after_opens(cls, v, values):
        if v and values.get('opensAt'):
            if time.fromisoformat(v) <= time.fromisoformat(values['opensAt']):
                raise ValueError('Closing time must be after opening time')
        return v


class VenueBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    venueType: VenueType
    department: str = Field(..., min_length=2, max_length=100)
    location: Optional[str] = Field(None, max_length=300)
    capacity: int = Field(..., ge=1, description="Maximum capacity")
    facultyInCharge: Optional[str] = Field(None, max_length=200)
    facultyContact: Optional[str] = Field(None, max_length=20)
    features: Optional[List[str]] = Field(default_factory=list)
    
    @validator('facultyContact')
    def validate_contact(cls, v):
        if v and not CONTACT_PATTERN.match(v):
            raise ValueError('Invalid contact number format')
        return v


class VenueCreate(VenueBase):
    bookingRules: BookingRules = Field(default_factory=BookingRules)


class VenueUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    venueType: Optional[VenueType] = None
    department: Optional[str] = Field(None, min_length=2, max_length=100)
    location: Optional[str] = Field(None, max_length=300)
    capacity: Optional[int] = Field(None, ge=1)
    facultyInCharge: Optional[str] = Field(None, max_length=200)
    facultyContact: Optional[str] = Field(None, max_length=20)
    features: Optional[List[str]] = None
    bookingRules: Optional[BookingRules] = None
    
    @validator('facultyContact')
    def validate_contact(cls, v):
        if v and not CONTACT_PATTERN.match(v):
            raise ValueError('Invalid contact number format')
        return v


class VenueMaintenanceUpdate(BaseModel):
    maintenanceMode: bool
    reason: Optional[str] = Field(None, max_length=500)


class BookingRulesResponse(BaseModel):
    maxAdvanceBookingDays: Optional[int] = None
    minAdvanceBookingHours: Optional[int] = None
    maxBookingDurationHours: Optional[int] = None
    allowWeekendBookings: bool
    opensAt: Optional[str] = None
    closesAt: Optional[str] = None


class VenueResponse(BaseModel):
    id: str
    name: str
    venueType: str
    department: str
    location: Optional[str] = None
    capacity: int
    facultyInCharge: Optional[str] = None
    facultyContact: Optional[str] = None
    features: List[str] = []
    isActive: bool
    maintenanceMode: bool
    maintenanceReason: Optional[str] = None
    bookingRules: BookingRulesResponse
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    
    class Config:
        from_attributes = True


class PaginationInfo(BaseModel):
    currentPage: int
    totalPages: int
    totalItems: int
    itemsPerPage: int


class VenuesResponse(BaseModel):
    success: bool = True
    venues: List[VenueResponse]
    pagination: Optional[PaginationInfo] = None


class VenueDetailResponse(BaseModel):
    success: bool = True
    venue: VenueResponse
