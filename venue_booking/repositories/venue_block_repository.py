from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import date, time
from venue_booking.models.venue_block import VenueBlock, BlockType
import uuid


class VenueBlockRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, block_id: str) -> Optional[VenueBlock]:
        return self.db.query(VenueBlock).filter(VenueBlock.id == block_id).first()
    
    def list_for_venue(
        self,
        venue_id: str,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None
    ) -> List[VenueBlock]:
        """
        Blocks on a venue, optionally narrowed to those whose date span
        touches [from_date, to_date].
        """
        query = self.db.query(VenueBlock).filter(VenueBlock.venue_id == venue_id)
        
        if from_date:
            query = query.filter(VenueBlock.to_date >= from_date)
        
        if to_date:
            query = query.filter(VenueBlock.from_date <= to_date)
        
        return query.order_by(VenueBlock.from_date, VenueBlock.from_time).all()
    
    def find_exact(
        self,
        venue_id: str,
        from_date: date,
        from_time: time,
        to_date: date,
        to_time: time
    ) -> Optional[VenueBlock]:
        return self.db.query(VenueBlock).filter(
            VenueBlock.venue_id == venue_id,
            VenueBlock.from_date == from_date,
            VenueBlock.from_time == from_time,
            VenueBlock.to_date == to_date,
            VenueBlock.to_time == to_time
        ).first()
    
    def build(
        self,
        venue_id: str,
        from_date: date,
        from_time: time,
        to_date: date,
        to_time: time,
        block_type: BlockType = BlockType.OTHER,
        reason: Optional[str] = None,
        created_by: Optional[str] = None
    ) -> VenueBlock:
        return VenueBlock(
            id=str(uuid.uuid4()),
            venue_id=venue_id,
            from_date=from_date,
            from_time=from_time,
            to_date=to_date,
            to_time=to_time,
            block_type=block_type,
            reason=reason,
            created_by=created_by
        )
    
    def create_many(self, blocks: List[VenueBlock]) -> List[VenueBlock]:
        """Insert all blocks in one transaction; none are stored if one fails."""
        try:
            self.db.add_all(blocks)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        
        for block in blocks:
            self.db.refresh(block)
        return blocks
    
    def delete(self, block: VenueBlock) -> None:
        self.db.delete(block)
        self.db.commit()
