import hashlib
import re
from collections import Counter
from typing import Dict

# Anything that is not a letter, digit or underscore
NON_WORD_PATTERN = re.compile(r"\W")


def clean_string(text: str) -> str:
    """Strip non-word characters and lower-case the rest"""
    return NON_WORD_PATTERN.sub("", text).lower()


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of the raw string (UTF-8 bytes)"""
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()


def is_palindrome(text: str) -> bool:
    """Check if string is palindrome (case-insensitive, ignoring non-word characters)"""
    cleaned = clean_string(text)
    return cleaned == cleaned[::-1]


def count_unique_characters(text: str) -> int:
    """Count distinct characters in the cleaned string"""
    return len(set(clean_string(text)))


def count_words(text: str) -> int:
    """Count words separated by whitespace"""
    return len(text.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character in the cleaned string"""
    return dict(Counter(clean_string(text)))


def analyze_string(value: str) -> Dict:
    """
    Analyze a string and return all computed properties.

    Length and word count look at the original string; palindrome, unique
    characters and frequency map look at the cleaned one. The result has no
    ``created_at``: that is stamped by the store on insert.
    """
    return {
        "value": value,
        "length": len(value),
        "is_palindrome": is_palindrome(value),
        "unique_characters": count_unique_characters(value),
        "word_count": count_words(value),
        "sha256_hash": compute_sha256(value),
        "character_frequency_map": get_character_frequency(value),
    }
