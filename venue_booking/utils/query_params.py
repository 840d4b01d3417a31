from typing import Optional, Type, TypeVar
from datetime import date
from fastapi import HTTPException, status
import enum
import math

E = TypeVar("E", bound=enum.Enum)


def parse_enum(enum_cls: Type[E], value: Optional[str], field: str) -> Optional[E]:
    if value is None or value == "" or value == "all":
        return None
    try:
        return enum_cls(value.lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} must be one of: {allowed}"
        )


def parse_date(value: Optional[str], field: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} must be in YYYY-MM-DD format"
        )


def validate_paging(page: int, limit: int, max_limit: int = 100) -> None:
    if page < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Page number must be at least 1"
        )
    
    if limit < 1 or limit > max_limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Limit must be between 1 and {max_limit}"
        )


def pagination(page: int, limit: int, total: int) -> dict:
    return {
        "currentPage": page,
        "totalPages": math.ceil(total / limit) if total else 0,
        "totalItems": total,
        "itemsPerPage": limit
    }
