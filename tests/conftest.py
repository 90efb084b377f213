"""
Pytest fixtures for tokengraph tests.
"""

import json

import pytest

from tokengraph import (
    BorderValue,
    DesignToken,
    DimensionValue,
    Reference,
    ShadowValue,
    StrokeStyleValue,
    TokenGraph,
    TokenGroup,
    TokenType,
    TypographyValue,
    parse_color,
)


@pytest.fixture
def dtcg_document() -> dict:
    """A DTCG 2025 document mixing literals, aliases and composite parts."""
    return {
        "$schema": "https://www.designtokens.org/schemas/2025.10/format.json",
        "colors": {
            "$type": "color",
            "$description": "Brand palette",
            "primary": {
                "$type": "color",
                "$value": {"colorSpace": "srgb", "components": [0.2, 0.4, 1], "hex": "#3366ff"},
                "$description": "Primary brand color",
            },
            "accent": {"$type": "color", "$value": "{colors.primary}"},
            "overlay": {
                "$type": "color",
                "$value": {"colorSpace": "oklch", "components": [0.5, 0.1, "none"], "alpha": 0.5},
            },
        },
        "spacing": {
            "sm": {"$type": "dimension", "$value": {"value": 8, "unit": "px"}},
            "md": {"$type": "dimension", "$value": {"value": 1, "unit": "rem"}},
        },
        "shadows": {
            "card": {
                "$type": "shadow",
                "$value": {
                    "color": "{colors.primary}",
                    "offsetX": {"value": 0, "unit": "px"},
                    "offsetY": "{spacing.sm}",
                    "blur": {"value": 8, "unit": "px"},
                    "spread": {"value": 0, "unit": "px"},
                },
                "$deprecated": "Use shadows.raised",
            },
        },
        "typography": {
            "body": {
                "$type": "typography",
                "$value": {
                    "fontFamily": ["Open Sans", "sans-serif"],
                    "fontSize": "{spacing.md}",
                    "fontWeight": 400,
                    "letterSpacing": {"value": 0, "unit": "px"},
                    "lineHeight": 1.5,
                },
                "$extensions": {"com.example": {"figmaStyle": "Body/Regular"}},
            },
        },
    }


@pytest.fixture
def dtcg_text(dtcg_document) -> str:
    return json.dumps(dtcg_document, indent=2)


@pytest.fixture
def palette_graph() -> TokenGraph:
    """Small graph: two colors, an alias and composites referencing them."""
    graph = TokenGraph()
    graph.set("colors", TokenGroup(type=TokenType.COLOR))
    graph.set("colors.blue", DesignToken.color("#0000ff"))
    graph.set("colors.primary", DesignToken.reference("colors.blue", TokenType.COLOR))
    graph.set("button.background", DesignToken.reference("colors.primary", TokenType.COLOR))
    graph.set("shadows.card", DesignToken.shadow(ShadowValue(
        color=Reference("colors.blue"),
        offset_y=DimensionValue(4),
        blur=DimensionValue(8),
    )))
    graph.set("borders.focus", DesignToken.border(BorderValue(
        color=Reference("colors.primary"),
        width=DimensionValue(2),
        style=StrokeStyleValue("dashed"),
    )))
    graph.set("typography.body", DesignToken.typography(TypographyValue(
        font_family=["Inter", "sans-serif"],
        font_size=DimensionValue(16),
        font_weight=400,
        letter_spacing=DimensionValue(0),
        line_height=1.5,
    )))
    return graph


@pytest.fixture
def simple_css_graph() -> TokenGraph:
    graph = TokenGraph()
    graph.set("colors.primary", DesignToken.color(parse_color("#3366ff")))
    graph.set("colors.accent", DesignToken.reference("colors.primary", TokenType.COLOR))
    return graph
