from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from string_analyzer.database import get_db
from string_analyzer.crud import string_record as crud
from string_analyzer.schemas.string_record import (
    FilterSet,
    InterpretedQuery,
    MAX_FILTER_INT,
    NaturalLanguageResponse,
    StringCreate,
    StringListResponse,
    StringResponse,
)
from string_analyzer.services.analyzer import analyze_string
from string_analyzer.services.query_parser import parse_natural_language_query

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND = "String does not exist in the system"


@router.post("/strings", response_model=StringResponse, status_code=status.HTTP_201_CREATED)
def create_string(string_data: StringCreate, db: Session = Depends(get_db)):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    properties = analyze_string(string_data.value)
    db_string = crud.create_string_record(db, properties)
    return StringResponse.from_record(db_string)


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(
    is_palindrome: Optional[bool] = Query(None),
    min_length: Optional[int] = Query(None, ge=0, le=MAX_FILTER_INT),
    max_length: Optional[int] = Query(None, ge=0, le=MAX_FILTER_INT),
    word_count: Optional[int] = Query(None, ge=0, le=MAX_FILTER_INT),
    contains_character: Optional[str] = Query(None, min_length=1, max_length=1),
    db: Session = Depends(get_db)
):
    """
    Get all strings with optional filtering.
    """
    filters = FilterSet(
        is_palindrome=is_palindrome,
        min_length=min_length,
        max_length=max_length,
        word_count=word_count,
        contains_character=contains_character,
    )
    strings = crud.get_all_strings(db, filters)
    data = [StringResponse.from_record(s) for s in strings]

    return StringListResponse(
        data=data,
        count=len(data),
        filters_applied=filters.applied()
    )


# Registered before /strings/{string_value} so the path is not swallowed by it
@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    db: Session = Depends(get_db)
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    filters = parse_natural_language_query(query)
    strings = crud.get_all_strings(db, filters)
    data = [StringResponse.from_record(s) for s in strings]

    return NaturalLanguageResponse(
        data=data,
        count=len(data),
        interpreted_query=InterpretedQuery(
            original=query,
            parsed_filters=filters.applied()
        )
    )


@router.get("/strings/{string_value}", response_model=StringResponse)
def get_string(string_value: str, db: Session = Depends(get_db)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    db_string = crud.get_string_by_value(db, string_value)
    if not db_string:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return StringResponse.from_record(db_string)


@router.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, db: Session = Depends(get_db)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    db_string = crud.get_string_by_value(db, string_value)
    if not db_string:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    crud.delete_string_by_hash(db, db_string.id)
    return None
