from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, List
from datetime import datetime, timezone


# Largest value a SQL BIGINT column can be compared against
MAX_FILTER_INT = 2 ** 63 - 1


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class StringCreate(BaseModel):
    value: str = Field(..., min_length=1, description="String to analyze")


class StringProperties(BaseModel):
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]


class StringResponse(BaseModel):
    id: str
    value: str
    properties: StringProperties
    created_at: datetime

    @classmethod
    def from_record(cls, record) -> "StringResponse":
        """Build the wire shape from a stored StringRecord"""
        return cls(
            id=record.id,
            value=record.value,
            properties=StringProperties(
                length=record.length,
                is_palindrome=record.is_palindrome,
                unique_characters=record.unique_characters,
                word_count=record.word_count,
                sha256_hash=record.sha256_hash,
                character_frequency_map=record.character_frequency_map,
            ),
            created_at=_as_utc(record.created_at),
        )


class FilterSet(BaseModel):
    """Independent, optional constraints over stored strings (AND-ed together)."""

    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = Field(None, ge=0, le=MAX_FILTER_INT)
    max_length: Optional[int] = Field(None, ge=0, le=MAX_FILTER_INT)
    word_count: Optional[int] = Field(None, ge=0, le=MAX_FILTER_INT)
    contains_character: Optional[str] = Field(None, min_length=1, max_length=1)

    def applied(self) -> Dict[str, Any]:
        """Only the constraints that are actually set"""
        return self.model_dump(exclude_none=True)

    def is_empty(self) -> bool:
        return not self.applied()


class StringListResponse(BaseModel):
    data: List[StringResponse]
    count: int
    filters_applied: Dict[str, Any]


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResponse(BaseModel):
    data: List[StringResponse]
    count: int
    interpreted_query: InterpretedQuery
