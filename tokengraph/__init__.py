"""
tokengraph - Design tokens with alias resolution and format conversion.

Models W3C DTCG design tokens, resolves references between them (including
references inside composite values such as shadows and typography), and
converts between DTCG JSON, DTCG resolver documents, CSS custom properties
and SCSS without flattening references.

Usage:
    from tokengraph import (
        TokenGraph, DesignToken, TokenType, parse_color,
        import_dtcg, export_css,
    )

    graph = import_dtcg(Path("tokens.json").read_text())

    # Edit
    graph.set("colors.brand", DesignToken.color("oklch(0.7 0.15 250)"))
    graph.move("colors.brand", "brand.primary")   # references follow

    # Resolve
    result = graph.resolve("button.background")
    if isinstance(result, ResolutionError):
        print(result.message)

    # Export
    css = export_css(graph)

The conversion HTTP API lives in ``tokengraph.api`` (requires FastAPI).
"""

from .color import COLOR_SPACES, ColorValue, parse_color, serialize_color, try_parse_color
from .config import APIConfig, ExportConfig, ImportConfig
from .exceptions import (
    GraphStructureError,
    ImportIssue,
    ImportParseError,
    TokenExistsError,
    TokenGraphError,
    TokenNotFoundError,
    TokenPathError,
    TokenValueError,
    UnsupportedFormatError,
)
from .tokens import (
    BorderValue,
    CubicBezierValue,
    DesignToken,
    DimensionValue,
    DurationValue,
    GradientStop,
    Reference,
    ShadowValue,
    StrokeStyleValue,
    TokenGroup,
    TokenType,
    TransitionValue,
    TypographyValue,
)
from .codec import (
    CSSReferenceSyntax,
    DTCGReferenceSyntax,
    ReferenceSyntax,
    SCSSReferenceSyntax,
    css_declarations,
    decode_json,
    encode_json,
    format_css,
    infer_css_value,
    kebab_case,
)
from .graph import ResolutionError, ResolutionKind, ResolvedValue, TokenGraph
from .schema import is_resolver_document
from .importers import (
    CSSVariablesImporter,
    DTCGImporter,
    LegacyDTCGImporter,
    ResolverImporter,
    get_importer,
    import_css_variables,
    import_dtcg,
    import_dtcg_legacy,
    import_resolver,
    load_tokens,
)
from .exporters import (
    CSSExporter,
    JSONExporter,
    ResolverExporter,
    SCSSExporter,
    export_css,
    export_json,
    export_resolver,
    export_scss,
    get_exporter,
)

__version__ = "0.1.0"

__all__ = [
    # Colors
    "COLOR_SPACES",
    "ColorValue",
    "parse_color",
    "try_parse_color",
    "serialize_color",
    # Config
    "APIConfig",
    "ExportConfig",
    "ImportConfig",
    # Exceptions
    "TokenGraphError",
    "TokenPathError",
    "TokenNotFoundError",
    "TokenExistsError",
    "GraphStructureError",
    "TokenValueError",
    "ImportIssue",
    "ImportParseError",
    "UnsupportedFormatError",
    # Tokens
    "TokenType",
    "Reference",
    "DimensionValue",
    "DurationValue",
    "CubicBezierValue",
    "StrokeStyleValue",
    "ShadowValue",
    "BorderValue",
    "TransitionValue",
    "GradientStop",
    "TypographyValue",
    "DesignToken",
    "TokenGroup",
    # Codec
    "ReferenceSyntax",
    "DTCGReferenceSyntax",
    "CSSReferenceSyntax",
    "SCSSReferenceSyntax",
    "decode_json",
    "encode_json",
    "format_css",
    "css_declarations",
    "infer_css_value",
    "kebab_case",
    # Graph
    "TokenGraph",
    "ResolvedValue",
    "ResolutionError",
    "ResolutionKind",
    # Importers
    "DTCGImporter",
    "LegacyDTCGImporter",
    "ResolverImporter",
    "CSSVariablesImporter",
    "get_importer",
    "import_dtcg",
    "import_dtcg_legacy",
    "import_resolver",
    "import_css_variables",
    "load_tokens",
    "is_resolver_document",
    # Exporters
    "JSONExporter",
    "ResolverExporter",
    "CSSExporter",
    "SCSSExporter",
    "get_exporter",
    "export_json",
    "export_resolver",
    "export_css",
    "export_scss",
]
