from pydantic import BaseModel, Field
from typing import Optional, List
from venue_booking.models.venue_block import BlockType
from venue_booking.schemas.booking import BookingWindow


class VenueBlockCreate(BookingWindow):
    blockType: BlockType = BlockType.OTHER
    reason: Optional[str] = Field(None, max_length=500)


class VenueBlockBulkCreate(BaseModel):
    blocks: List[VenueBlockCreate] = Field(..., min_length=1, max_length=100)


class VenueBlockResponse(BaseModel):
    id: str
    venueId: str
    fromDate: str
    toDate: str
    fromTime: str
    toTime: str
    blockType: str
    reason: Optional[str] = None
    createdBy: Optional[str] = None
    createdAt: Optional[str] = None

    class Config:
        from_attributes = True


class VenueBlocksResponse(BaseModel):
    success: bool = True
    blocks: List[VenueBlockResponse]
    overlappingBookingIds: List[str] = []
