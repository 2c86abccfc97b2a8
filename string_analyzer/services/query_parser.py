import re
import logging
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from pydantic import ValidationError

from string_analyzer.exceptions import EmptyQueryError, InvalidFiltersError, NoRecognizedFiltersError
from string_analyzer.schemas.string_record import FilterSet

logger = logging.getLogger(__name__)

Rule = Tuple[Pattern, Callable[[re.Match], Dict]]

# Evaluated in order over the lower-cased query. A later rule that sets the
# same field overwrites an earlier one, so "first vowel" beats an explicit letter.
QUERY_RULES: List[Rule] = [
    (re.compile(r"\b(?:single|one)[-\s]*words?\b"), lambda m: {"word_count": 1}),
    (re.compile(r"\bpalindrom(?:e|es|ic)\b"), lambda m: {"is_palindrome": True}),
    (
        re.compile(r"\blonger than ([0-9]+)\s*characters?\b"),
        lambda m: {"min_length": int(m.group(1)) + 1},
    ),
    (
        re.compile(r"\bcontain(?:s|ing)?(?: the)? letter ([a-z])"),
        lambda m: {"contains_character": m.group(1)},
    ),
    (re.compile(r"\bfirst vowel\b"), lambda m: {"contains_character": "a"}),
]


def parse_natural_language_query(query: Optional[str]) -> FilterSet:
    """
    Parse natural language query into filter parameters
    Examples:
    - "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
    - "strings longer than 10 characters" -> {min_length: 11}
    - "strings that contain the letter z" -> {contains_character: "z"}

    Raises EmptyQueryError for a blank query, NoRecognizedFiltersError when
    nothing in it matches and InvalidFiltersError when a parsed number is out
    of range. Unrecognized words are ignored.
    """
    if query is None or not query.strip():
        raise EmptyQueryError(query)

    lowered = query.lower()
    filters: Dict = {}

    for pattern, effect in QUERY_RULES:
        match = pattern.search(lowered)
        if match:
            filters.update(effect(match))

    if not filters:
        logger.warning(f"No recognizable filters in query: {query!r}")
        raise NoRecognizedFiltersError(query)

    try:
        return FilterSet(**filters)
    except ValidationError:
        logger.warning(f"Filters out of range in query: {query!r}")
        raise InvalidFiltersError(query)
