"""
Custom exception hierarchy for tokengraph.

Provides structured exception types for the graph, the value codec and the
format importers. Reference resolution failures are not exceptions: they are
returned as ``ResolutionError`` values by ``TokenGraph.resolve``.
"""

from dataclasses import dataclass


class TokenGraphError(Exception):
    """Base exception for all tokengraph errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Graph Exceptions
# =============================================================================


class TokenPathError(TokenGraphError):
    """Raised when a token or group path contains an invalid name."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Invalid token path '{path}': {reason}",
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


class TokenNotFoundError(TokenGraphError):
    """Raised when a path does not exist in the graph."""

    def __init__(self, path: str):
        super().__init__(
            f"No token or group at '{path}'",
            details={"path": path},
        )
        self.path = path


class TokenExistsError(TokenGraphError):
    """Raised when a move or rename targets an occupied path."""

    def __init__(self, path: str):
        super().__init__(
            f"A token or group already exists at '{path}'",
            details={"path": path},
        )
        self.path = path


class GraphStructureError(TokenGraphError):
    """Raised when an edit would break the group/token tree structure."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Cannot modify '{path}': {reason}",
            details={"path": path, "reason": reason},
        )
        self.path = path
        self.reason = reason


# =============================================================================
# Codec Exceptions
# =============================================================================


class TokenValueError(TokenGraphError, ValueError):
    """Raised when a raw value does not match the shape of its token type."""

    def __init__(self, token_type: str, reason: str, field: str = ""):
        details = {"type": token_type}
        if field:
            details["field"] = field
        where = f" (field '{field}')" if field else ""
        super().__init__(f"Invalid {token_type}{where}: {reason}", details=details)
        self.token_type = token_type
        self.reason = reason
        self.field = field


# =============================================================================
# Import / Export Exceptions
# =============================================================================


@dataclass(frozen=True)
class ImportIssue:
    """A single problem found while importing a document."""

    location: str  # token path or "line N"
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}" if self.location else self.message


class ImportParseError(TokenGraphError):
    """Raised when an import document is malformed. No graph is produced."""

    def __init__(self, format_name: str, issues: list[ImportIssue]):
        count = len(issues)
        summary = str(issues[0]) if issues else "unknown error"
        if count > 1:
            summary = f"{summary} (and {count - 1} more)"
        super().__init__(
            f"Failed to import {format_name} document: {summary}",
            details={"format": format_name, "issue_count": count},
        )
        self.format_name = format_name
        self.issues = list(issues)


class UnsupportedFormatError(TokenGraphError):
    """Raised when an unknown import or export format is requested."""

    def __init__(self, format_name: str, supported: list[str]):
        super().__init__(
            f"Unsupported format '{format_name}'",
            details={"format": format_name, "supported": supported},
        )
        self.format_name = format_name
        self.supported = supported
