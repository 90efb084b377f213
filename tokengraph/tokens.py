"""
Design Tokens - W3C DTCG value model

Implements the typed values of the W3C Design Tokens Community Group format:
- Primitive types: color, dimension, duration, number, fontFamily, fontWeight, cubicBezier
- Composite types: strokeStyle, border, transition, shadow, gradient, typography

Any token value, and any part of a composite value, may be a ``Reference``
to another token. References are plain paths, resolved by the graph at read
time.

Composite part fields carry their DTCG key and expected token type in the
dataclass field metadata, which is what ``map_references`` walks.

References:
- DTCG Format: https://www.designtokens.org/tr/2025.10/format/
"""

import logging
from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional, Union

from .color import ColorValue, parse_color
from .exceptions import TokenPathError, TokenValueError

logger = logging.getLogger(__name__)


class TokenType(str, Enum):
    """DTCG token types."""

    # Primitive types
    COLOR = "color"
    DIMENSION = "dimension"
    DURATION = "duration"
    NUMBER = "number"
    FONT_FAMILY = "fontFamily"
    FONT_WEIGHT = "fontWeight"
    CUBIC_BEZIER = "cubicBezier"

    # Composite types
    STROKE_STYLE = "strokeStyle"
    BORDER = "border"
    TRANSITION = "transition"
    SHADOW = "shadow"
    GRADIENT = "gradient"
    TYPOGRAPHY = "typography"


DIMENSION_UNITS = ("px", "rem")
DURATION_UNITS = ("ms", "s")

STROKE_STYLE_KEYWORDS = (
    "solid", "dashed", "dotted", "double", "groove", "ridge", "outset", "inset",
)
LINE_CAPS = ("round", "butt", "square")

FONT_WEIGHT_KEYWORDS = {
    "thin": 100,
    "hairline": 100,
    "extra-light": 200,
    "ultra-light": 200,
    "light": 300,
    "normal": 400,
    "regular": 400,
    "book": 400,
    "medium": 500,
    "semi-bold": 600,
    "demi-bold": 600,
    "bold": 700,
    "extra-bold": 800,
    "ultra-bold": 800,
    "black": 900,
    "heavy": 900,
    "extra-black": 950,
    "ultra-black": 950,
}

ROOT_TOKEN_NAME = "$root"


# =============================================================================
# Paths and References
# =============================================================================

def validate_name(name: str, path: str = "") -> str:
    """
    Check a single token or group name.

    Names must be non-empty, must not start with ``$`` (``$root`` excepted)
    and must not contain ``{``, ``}`` or ``.``.
    """
    where = path or name
    if not name:
        raise TokenPathError(where, "empty name")
    if name.startswith("$") and name != ROOT_TOKEN_NAME:
        raise TokenPathError(where, f"name '{name}' must not start with '$'")
    for char in "{}.":
        if char in name:
            raise TokenPathError(where, f"name '{name}' must not contain '{char}'")
    return name


def split_path(path: str) -> list[str]:
    """Split a dotted token path into validated segments."""
    if not isinstance(path, str) or not path:
        raise TokenPathError(str(path), "empty path")
    segments = path.split(".")
    for segment in segments:
        validate_name(segment, path)
    return segments


def parent_path(path: str) -> str:
    """Parent of a dotted path; ``""`` for top-level nodes."""
    return path.rpartition(".")[0]


@dataclass(frozen=True)
class Reference:
    """An alias to another token, by full dotted path."""
    path: str

    @property
    def segments(self) -> list[str]:
        return self.path.split(".")

    def to_dtcg(self) -> str:
        return "{" + self.path + "}"

    def __str__(self) -> str:
        return self.to_dtcg()


def format_number(value: Union[int, float]) -> str:
    """Render a number without a trailing ``.0`` for whole floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _part(token_type: TokenType, key: str, **kwargs):
    """Field for a composite part that may hold a literal or a Reference."""
    return field(metadata={"type": token_type, "key": key}, **kwargs)


# =============================================================================
# Primitive Values
# =============================================================================

@dataclass
class DimensionValue:
    """A length: ``{"value": 16, "unit": "px"}``."""
    value: Union[int, float]
    unit: str = "px"

    def __post_init__(self):
        if not _is_number(self.value):
            raise TokenValueError("dimension", f"value must be a number, got {self.value!r}")
        if self.unit not in DIMENSION_UNITS:
            raise TokenValueError("dimension", f"unsupported unit '{self.unit}'")

    def to_css(self) -> str:
        return f"{format_number(self.value)}{self.unit}"

    def to_dtcg(self) -> dict:
        return {"value": self.value, "unit": self.unit}


@dataclass
class DurationValue:
    """A time span: ``{"value": 200, "unit": "ms"}``."""
    value: Union[int, float]
    unit: str = "ms"

    def __post_init__(self):
        if not _is_number(self.value):
            raise TokenValueError("duration", f"value must be a number, got {self.value!r}")
        if self.unit not in DURATION_UNITS:
            raise TokenValueError("duration", f"unsupported unit '{self.unit}'")

    def to_css(self) -> str:
        return f"{format_number(self.value)}{self.unit}"

    def to_dtcg(self) -> dict:
        return {"value": self.value, "unit": self.unit}


@dataclass
class CubicBezierValue:
    """Timing curve control points; x coordinates are limited to [0, 1]."""
    p1x: float
    p1y: float
    p2x: float
    p2y: float

    def __post_init__(self):
        for name in ("p1x", "p1y", "p2x", "p2y"):
            if not _is_number(getattr(self, name)):
                raise TokenValueError("cubicBezier", f"{name} must be a number")
        for name in ("p1x", "p2x"):
            if not 0 <= getattr(self, name) <= 1:
                raise TokenValueError("cubicBezier", f"{name} must be in [0, 1]")

    @classmethod
    def ease(cls) -> "CubicBezierValue":
        return cls(0.25, 0.1, 0.25, 1.0)

    @classmethod
    def ease_in(cls) -> "CubicBezierValue":
        return cls(0.42, 0.0, 1.0, 1.0)

    @classmethod
    def ease_out(cls) -> "CubicBezierValue":
        return cls(0.0, 0.0, 0.58, 1.0)

    @classmethod
    def ease_in_out(cls) -> "CubicBezierValue":
        return cls(0.42, 0.0, 0.58, 1.0)

    @classmethod
    def linear(cls) -> "CubicBezierValue":
        return cls(0.0, 0.0, 1.0, 1.0)

    def to_css(self) -> str:
        points = ", ".join(format_number(p) for p in self.to_dtcg())
        return f"cubic-bezier({points})"

    def to_dtcg(self) -> list:
        return [self.p1x, self.p1y, self.p2x, self.p2y]


@dataclass
class StrokeStyleValue:
    """
    Stroke style: either a keyword (``solid``, ``dashed``...) or a custom
    dash pattern with a line cap.
    """
    style: Optional[str] = None
    dash_array: Optional[list] = _part(TokenType.DIMENSION, "dashArray", default=None)
    line_cap: Optional[str] = None

    def __post_init__(self):
        if self.style is not None:
            if self.style not in STROKE_STYLE_KEYWORDS:
                raise TokenValueError("strokeStyle", f"unknown keyword '{self.style}'")
            return
        if self.dash_array is None and self.line_cap is None:
            raise TokenValueError("strokeStyle", "needs a keyword or a dash array")
        if self.line_cap is not None and self.line_cap not in LINE_CAPS:
            raise TokenValueError("strokeStyle", f"unknown line cap '{self.line_cap}'", "lineCap")

    @property
    def is_keyword(self) -> bool:
        return self.style is not None


# =============================================================================
# Composite Values
# =============================================================================

def _px(value: float) -> DimensionValue:
    return DimensionValue(value, "px")


@dataclass
class ShadowValue:
    """One shadow layer. A shadow token holds a list of layers."""
    color: Any = _part(TokenType.COLOR, "color")
    offset_x: Any = _part(TokenType.DIMENSION, "offsetX", default_factory=lambda: _px(0))
    offset_y: Any = _part(TokenType.DIMENSION, "offsetY", default_factory=lambda: _px(0))
    blur: Any = _part(TokenType.DIMENSION, "blur", default_factory=lambda: _px(0))
    spread: Any = _part(TokenType.DIMENSION, "spread", default_factory=lambda: _px(0))
    inset: bool = False


@dataclass
class BorderValue:
    color: Any = _part(TokenType.COLOR, "color")
    width: Any = _part(TokenType.DIMENSION, "width", default_factory=lambda: _px(1))
    style: Any = _part(
        TokenType.STROKE_STYLE, "style", default_factory=lambda: StrokeStyleValue("solid")
    )


@dataclass
class TransitionValue:
    duration: Any = _part(
        TokenType.DURATION, "duration", default_factory=lambda: DurationValue(200, "ms")
    )
    delay: Any = _part(
        TokenType.DURATION, "delay", default_factory=lambda: DurationValue(0, "ms")
    )
    timing_function: Any = _part(
        TokenType.CUBIC_BEZIER, "timingFunction", default_factory=CubicBezierValue.ease
    )


@dataclass
class GradientStop:
    """A color stop; position is a fraction of the gradient length."""
    color: Any = _part(TokenType.COLOR, "color")
    position: Any = _part(TokenType.NUMBER, "position", default=0.0)

    def __post_init__(self):
        if _is_number(self.position) and not 0 <= self.position <= 1:
            raise TokenValueError("gradient", "position must be in [0, 1]", "position")


@dataclass
class TypographyValue:
    font_family: Any = _part(
        TokenType.FONT_FAMILY, "fontFamily", default_factory=lambda: ["system-ui", "sans-serif"]
    )
    font_size: Any = _part(TokenType.DIMENSION, "fontSize", default_factory=lambda: _px(16))
    font_weight: Any = _part(TokenType.FONT_WEIGHT, "fontWeight", default=400)
    letter_spacing: Any = _part(
        TokenType.DIMENSION, "letterSpacing", default_factory=lambda: _px(0)
    )
    line_height: Any = _part(TokenType.NUMBER, "lineHeight", default=1.5)


def part_fields(cls_or_value) -> list[tuple[str, str, TokenType]]:
    """``(attribute, DTCG key, expected type)`` for each composite part."""
    if not is_dataclass(cls_or_value):
        return []
    return [
        (f.name, f.metadata["key"], f.metadata["type"])
        for f in fields(cls_or_value)
        if "type" in f.metadata
    ]


def map_references(
    value: Any,
    fn: Callable[[Reference, TokenType, str], Any],
    expected: Optional[TokenType] = None,
    field_path: str = "",
) -> Any:
    """
    Return ``value`` with every Reference replaced by ``fn(ref, type, field)``.

    ``type`` is the token type expected at the reference position and
    ``field`` its location inside the value (``""`` for a whole-token alias,
    ``color``, ``[0].offsetX``, ``style.dashArray[1]``...). The input is not
    modified.
    """
    if isinstance(value, Reference):
        return fn(value, expected, field_path)
    if isinstance(value, list):
        return [
            map_references(item, fn, expected, f"{field_path}[{index}]")
            for index, item in enumerate(value)
        ]
    parts = part_fields(value)
    if not parts:
        return value
    changes = {}
    for name, key, part_type in parts:
        sub_path = f"{field_path}.{key}" if field_path else key
        changes[name] = map_references(getattr(value, name), fn, part_type, sub_path)
    return replace(value, **changes)


def find_references(value: Any, token_type: Optional[TokenType] = None) -> list[tuple[str, TokenType, Reference]]:
    """All references in a value as ``(field, expected type, reference)``."""
    found = []

    def collect(ref, expected, field_path):
        found.append((field_path, expected, ref))
        return ref

    map_references(value, collect, token_type)
    return found


# =============================================================================
# Tokens and Groups
# =============================================================================

@dataclass
class DesignToken:
    """
    A single design token.

    ``value`` is the typed literal for ``type`` or a Reference to another
    token of the same type.
    """
    type: TokenType
    value: Any
    description: Optional[str] = None
    extensions: Optional[dict] = None
    deprecated: Union[bool, str, None] = None

    @property
    def is_alias(self) -> bool:
        return isinstance(self.value, Reference)

    @property
    def references(self) -> list[Reference]:
        return [ref for _, _, ref in find_references(self.value, self.type)]

    @classmethod
    def color(cls, value: Union[str, ColorValue], **kwargs) -> "DesignToken":
        """Color token from a CSS color literal or a ColorValue."""
        if isinstance(value, str):
            value = parse_color(value)
        return cls(type=TokenType.COLOR, value=value, **kwargs)

    @classmethod
    def dimension(cls, value: float, unit: str = "px", **kwargs) -> "DesignToken":
        return cls(type=TokenType.DIMENSION, value=DimensionValue(value, unit), **kwargs)

    @classmethod
    def duration(cls, value: float, unit: str = "ms", **kwargs) -> "DesignToken":
        return cls(type=TokenType.DURATION, value=DurationValue(value, unit), **kwargs)

    @classmethod
    def number(cls, value: float, **kwargs) -> "DesignToken":
        return cls(type=TokenType.NUMBER, value=value, **kwargs)

    @classmethod
    def font_family(cls, value: Union[str, list[str]], **kwargs) -> "DesignToken":
        return cls(type=TokenType.FONT_FAMILY, value=value, **kwargs)

    @classmethod
    def font_weight(cls, value: Union[int, str], **kwargs) -> "DesignToken":
        return cls(type=TokenType.FONT_WEIGHT, value=value, **kwargs)

    @classmethod
    def cubic_bezier(cls, value: CubicBezierValue, **kwargs) -> "DesignToken":
        return cls(type=TokenType.CUBIC_BEZIER, value=value, **kwargs)

    @classmethod
    def stroke_style(cls, value: Union[str, StrokeStyleValue], **kwargs) -> "DesignToken":
        if isinstance(value, str):
            value = StrokeStyleValue(value)
        return cls(type=TokenType.STROKE_STYLE, value=value, **kwargs)

    @classmethod
    def shadow(cls, value: Union[ShadowValue, list], **kwargs) -> "DesignToken":
        """Shadow token from one layer or a list of layers."""
        if isinstance(value, ShadowValue):
            value = [value]
        return cls(type=TokenType.SHADOW, value=value, **kwargs)

    @classmethod
    def border(cls, value: BorderValue, **kwargs) -> "DesignToken":
        return cls(type=TokenType.BORDER, value=value, **kwargs)

    @classmethod
    def transition(cls, value: TransitionValue, **kwargs) -> "DesignToken":
        return cls(type=TokenType.TRANSITION, value=value, **kwargs)

    @classmethod
    def gradient(cls, stops: list[GradientStop], **kwargs) -> "DesignToken":
        return cls(type=TokenType.GRADIENT, value=list(stops), **kwargs)

    @classmethod
    def typography(cls, value: TypographyValue, **kwargs) -> "DesignToken":
        return cls(type=TokenType.TYPOGRAPHY, value=value, **kwargs)

    @classmethod
    def reference(cls, path: str, token_type: TokenType, **kwargs) -> "DesignToken":
        """Alias token pointing at ``path``."""
        split_path(path)
        return cls(type=token_type, value=Reference(path), **kwargs)


@dataclass
class TokenGroup:
    """
    Group metadata. The ordered children of a group live in the graph.

    ``type`` is inherited by tokens without their own type when importing
    legacy documents; it is kept for round-trips in every format.
    """
    type: Optional[TokenType] = None
    description: Optional[str] = None
    extensions: Optional[dict] = None
    deprecated: Union[bool, str, None] = None


Node = Union[DesignToken, TokenGroup]
