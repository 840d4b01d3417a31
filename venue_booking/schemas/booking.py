from pydantic import BaseModel, Field, validator
from typing import Optional, List
import re

MOBILE_PATTERN = re.compile(r"^\d{10}$")
REVIEW_STATUSES = ["approved", "rejected", "cancelled"]


class BookingWindow(BaseModel):
    """
    Wire form of a booking window. Format and ordering are checked by the
    availability checker so that every malformed window is reported the same way.
    """
    fromDate: str = Field(..., description="Start date in YYYY-MM-DD format")
    toDate: str = Field(..., description="End date in YYYY-MM-DD format")
    fromTime: str = Field(..., description="Start time in HH:MM format (24-hour)")
    toTime: str = Field(..., description="End time in HH:MM format (24-hour)")


class BookingCreate(BookingWindow):
    venueId: str
    clubId: str
    eventName: str = Field(..., min_length=3, max_length=200)
    eventType: Optional[str] = Field(None, max_length=50)
    facultyInCharge: str = Field(..., min_length=2, max_length=200)
    department: str = Field(..., min_length=2, max_length=100)
    mobileNumber: str
    participants: int = Field(..., ge=1)
    logistics: Optional[List[str]] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=2000)
    
    @validator('mobileNumber')
    def validate_mobile(cls, v):
        if not MOBILE_PATTERN.match(v):
            raise ValueError('Mobile number must be 10 digits')
        return v


class BookingUpdate(BaseModel):
    eventName: Optional[str] = Field(None, min_length=3, max_length=200)
    eventType: Optional[str] = Field(None, max_length=50)
    facultyInCharge: Optional[str] = Field(None, min_length=2, max_length=200)
    department: Optional[str] = Field(None, min_length=2, max_length=100)
    mobileNumber: Optional[str] = None
    participants: Optional[int] = Field(None, ge=1)
    logistics: Optional[List[str]] = None
    notes: Optional[str] = Field(None, max_length=2000)
    fromDate: Optional[str] = None
    toDate: Optional[str] = None
    fromTime: Optional[str] = None
    toTime: Optional[str] = None
    
    @validator('mobileNumber')
    def validate_mobile(cls, v):
        if v is not None and not MOBILE_PATTERN.match(v):
            raise ValueError('Mobile number must be 10 digits')
        return v


class BookingStatusUpdate(BaseModel):
    status: str
    reason: Optional[str] = Field(None, max_length=1000)
    
    @validator('status')
    def validate_status(cls, v):
        v = v.lower()
        if v not in REVIEW_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(REVIEW_STATUSES)}")
        return v


class ConflictInfo(BaseModel):
    bookingId: Optional[str] = None
    blockId: Optional[str] = None
    eventName: Optional[str] = None
    start: str
    end: str


class AvailabilityResponse(BaseModel):
    success: bool = True
    venueId: str
    available: bool
    conflict: Optional[ConflictInfo] = None
