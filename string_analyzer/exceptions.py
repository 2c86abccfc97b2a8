from typing import Optional


class StringAnalyzerError(Exception):
    """Base class for errors raised by the string analyzer."""


class QueryParseError(StringAnalyzerError):
    """A natural language query could not be turned into filters."""

    message = "Unable to parse natural language query"

    def __init__(self, query: Optional[str] = None, message: Optional[str] = None):
        self.query = query
        super().__init__(message or self.message)


class EmptyQueryError(QueryParseError):
    message = "Query parameter is required"


class NoRecognizedFiltersError(QueryParseError):
    message = "Unable to parse natural language query: no recognizable filters"


class InvalidFiltersError(QueryParseError):
    message = "Query parsed but resulted in invalid filter values"


class DuplicateRecordError(StringAnalyzerError):
    """Raised by the store when a content hash is already present."""

    def __init__(self, sha256_hash: str):
        self.sha256_hash = sha256_hash
        super().__init__("String already exists in the system")
