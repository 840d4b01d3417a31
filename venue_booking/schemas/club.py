from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional, List
import re


class ClubBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    department: str = Field(..., min_length=2, max_length=100)
    facultyCoordinator: Optional[str] = Field(None, max_length=200)
    contactEmail: Optional[EmailStr] = None
    contactPhone: Optional[str] = None
    
    @validator('contactPhone')
    def validate_phone(cls, v):
        if v and not re.fullmatch(r"\d{10}", v):
            raise ValueError('Contact phone must be 10 digits')
        return v


class ClubCreate(ClubBase):
    pass


class ClubUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    department: Optional[str] = Field(None, min_length=2, max_length=100)
    facultyCoordinator: Optional[str] = Field(None, max_length=200)
    contactEmail: Optional[EmailStr] = None
    contactPhone: Optional[str] = None
    
    @validator('contactPhone')
    def validate_phone(cls, v):
        if v and not re.fullmatch(r"\d{10}", v):
            raise ValueError('Contact phone must be 10 digits')
        return v


class ClubResponse(BaseModel):
    id: str
    name: str
    department: str
    facultyCoordinator: Optional[str] = None
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None
    isActive: bool
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
    
    class Config:
        from_attributes = True


class ClubsResponse(BaseModel):
    success: bool = True
    clubs: List[ClubResponse]


class ClubDetailResponse(BaseModel):
    success: bool = True
    club: ClubResponse
