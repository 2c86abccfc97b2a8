from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from string_analyzer.exceptions import DuplicateRecordError
from string_analyzer.models.string_record import StringRecord
from string_analyzer.schemas.string_record import FilterSet
from string_analyzer.services.analyzer import compute_sha256

logger = logging.getLogger(__name__)


def create_string_record(db: Session, properties: Dict) -> StringRecord:
    """
    Store an analyzed string keyed by its content hash.
    Raises DuplicateRecordError if the hash is already stored.
    """
    sha256_hash = properties["sha256_hash"]
    if get_string_by_hash(db, sha256_hash) is not None:
        raise DuplicateRecordError(sha256_hash)

    db_string = StringRecord(
        id=sha256_hash,
        value=properties["value"],
        length=properties["length"],
        is_palindrome=properties["is_palindrome"],
        unique_characters=properties["unique_characters"],
        word_count=properties["word_count"],
        sha256_hash=sha256_hash,
        character_frequency_map=properties["character_frequency_map"],
        created_at=datetime.now(timezone.utc),
    )

    db.add(db_string)
    try:
        db.commit()
    except IntegrityError:
        # lost the race against a concurrent insert of the same value
        db.rollback()
        raise DuplicateRecordError(sha256_hash)
    db.refresh(db_string)
    logger.info(f"Stored string {sha256_hash}")
    return db_string


def get_string_by_hash(db: Session, sha256_hash: str) -> Optional[StringRecord]:
    """Get string record by content hash"""
    return db.get(StringRecord, sha256_hash)


def get_string_by_value(db: Session, value: str) -> Optional[StringRecord]:
    """Get string record by value (looked up through its hash)"""
    return get_string_by_hash(db, compute_sha256(value))


def get_all_strings(db: Session, filters: Optional[FilterSet] = None) -> List[StringRecord]:
    """Get all strings matching every constraint in filters, newest first"""
    filters = filters or FilterSet()
    query = db.query(StringRecord)

    if filters.is_palindrome is not None:
        query = query.filter(StringRecord.is_palindrome == filters.is_palindrome)

    if filters.min_length is not None:
        query = query.filter(StringRecord.length >= filters.min_length)

    if filters.max_length is not None:
        query = query.filter(StringRecord.length <= filters.max_length)

    if filters.word_count is not None:
        query = query.filter(StringRecord.word_count == filters.word_count)

    records = query.order_by(StringRecord.created_at.desc()).all()

    # Not indexable: checked against each record's frequency map
    if filters.contains_character is not None:
        records = [
            r for r in records
            if filters.contains_character in r.character_frequency_map
        ]

    return records


def delete_string_by_hash(db: Session, sha256_hash: str) -> bool:
    """Delete string record by content hash"""
    db_string = get_string_by_hash(db, sha256_hash)
    if db_string:
        db.delete(db_string)
        db.commit()
        logger.info(f"Deleted string {sha256_hash}")
        return True
    return False
