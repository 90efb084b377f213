"""
Configuration for importers, exporters and the conversion API.
"""

from dataclasses import dataclass


@dataclass
class ExportConfig:
    """Options shared by the JSON, resolver, CSS and SCSS exporters."""

    # Variable naming (CSS/SCSS)
    path_separator: str = "-"
    prefix: str = ""

    # CSS block
    selector: str = ":root"
    indent: str = "  "

    # JSON
    json_indent: int = 2

    # Resolver documents: name of the set holding everything but modifiers
    resolver_set_name: str = "tokens"

    # Emit sub-properties (-font-size, -width, ...) before composite shorthands
    expand_composites: bool = True

    # Re-resolve the graph before export and report broken references
    validate_references: bool = True

    def __post_init__(self):
        """Reject separators that would collide with reference syntax."""
        if not self.path_separator or any(c in self.path_separator for c in "{}.$ ;:"):
            raise ValueError(f"Invalid path separator: {self.path_separator!r}")


@dataclass
class ImportConfig:
    """Options for the format importers."""

    # CSS: skip declarations whose token type cannot be inferred instead of failing
    skip_unknown: bool = False


@dataclass
class APIConfig:
    """Configuration for the conversion API."""

    title: str = "tokengraph API"
    version: str = "0.1.0"
    max_content_bytes: int = 2 * 1024 * 1024  # 2MB of token text per request
