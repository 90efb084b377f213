"""
Token value codec - typed values to and from DTCG JSON and CSS text

Every routine is a pure function dispatched on ``TokenType``:

- ``decode_json`` / ``encode_json``: DTCG ``$value`` payloads. ``strict=True``
  follows the 2025 format (object forms only, all composite fields
  required); ``strict=False`` also accepts the 2022 draft shorthands
  (``"16px"``, ``"#ff0000"``...) and missing composite fields.
- ``format_css`` / ``css_declarations``: CSS and SCSS value text.
- ``infer_css_value``: type inference for raw CSS custom property values.

A string matching the active reference syntax always decodes to a
``Reference``, whatever the declared type.
"""

import logging
import re
from typing import Any, Callable, Optional

from .color import COLOR_SPACES, NONE, ColorValue, parse_color, serialize_color, try_parse_color
from .exceptions import TokenPathError, TokenValueError
from .tokens import (
    FONT_WEIGHT_KEYWORDS,
    LINE_CAPS,
    ROOT_TOKEN_NAME,
    STROKE_STYLE_KEYWORDS,
    BorderValue,
    CubicBezierValue,
    DimensionValue,
    DurationValue,
    GradientStop,
    Reference,
    ShadowValue,
    StrokeStyleValue,
    TokenType,
    TransitionValue,
    TypographyValue,
    format_number,
    part_fields,
    split_path,
)

logger = logging.getLogger(__name__)

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_NUMBER_RE = re.compile(rf"^{_NUMBER}$")
_DIMENSION_RE = re.compile(rf"^({_NUMBER})(px|rem)$")
_DURATION_RE = re.compile(rf"^({_NUMBER})(ms|s)$")
_CUBIC_BEZIER_RE = re.compile(
    rf"^cubic-bezier\(\s*({_NUMBER})\s*,\s*({_NUMBER})\s*,\s*({_NUMBER})\s*,\s*({_NUMBER})\s*\)$"
)
_FONT_NAME_RE = re.compile(r"""^(?:"[^"]+"|'[^']+'|[A-Za-z_-][\w -]*)$""")


# =============================================================================
# Naming
# =============================================================================

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def kebab_case(name: str) -> str:
    """
    Convert a token name to a CSS identifier fragment.

    >>> kebab_case("fontSize")
    'font-size'
    >>> kebab_case("$root")
    'root'
    """
    if name == ROOT_TOKEN_NAME:
        return "root"
    text = _ACRONYM_BOUNDARY_RE.sub(r"\1-\2", name)
    text = _CAMEL_BOUNDARY_RE.sub(r"\1-\2", text)
    return "-".join(word.lower() for word in _WORD_RE.findall(text))


def css_variable_name(path: str, prefix: str = "", separator: str = "-") -> str:
    """Variable name (without ``--`` or ``$``) for a dotted token path."""
    words = [kebab_case(segment) for segment in path.split(".")]
    if prefix:
        words.insert(0, prefix)
    return separator.join(word for word in words if word)


# =============================================================================
# Reference Syntaxes
# =============================================================================

class ReferenceSyntax:
    """How references are written in one textual format."""

    name = ""
    _pattern: re.Pattern

    def matches(self, text: str) -> bool:
        """Whether ``text`` is written as a reference (its path is not checked)."""
        return bool(self._pattern.match(text.strip()))

    def parse(self, text: str) -> Optional[Reference]:
        """Return the Reference written in ``text``, or None if it is not one."""
        raise NotImplementedError

    def format(self, reference: Reference) -> str:
        raise NotImplementedError


class DTCGReferenceSyntax(ReferenceSyntax):
    """``{group.token}`` curly-brace aliases."""

    name = "dtcg"
    _pattern = re.compile(r"^\{([^{}]*)\}$")

    def parse(self, text: str) -> Optional[Reference]:
        match = self._pattern.match(text.strip())
        if not match:
            return None
        path = match.group(1).strip()
        split_path(path)
        return Reference(path)

    def format(self, reference: Reference) -> str:
        return reference.to_dtcg()


class CSSReferenceSyntax(ReferenceSyntax):
    """``var(--name)`` lookups; a fallback argument is ignored."""

    name = "css"
    _pattern = re.compile(r"^var\(\s*--([A-Za-z0-9_-]+)\s*(?:,.*)?\)$", re.DOTALL)

    def __init__(self, prefix: str = "", separator: str = "-"):
        self.prefix = prefix
        self.separator = separator

    def variable_name(self, path: str) -> str:
        return css_variable_name(path, self.prefix, self.separator)

    def parse(self, text: str) -> Optional[Reference]:
        match = self._pattern.match(text.strip())
        return Reference(match.group(1)) if match else None

    def format(self, reference: Reference) -> str:
        return f"var(--{self.variable_name(reference.path)})"


class SCSSReferenceSyntax(CSSReferenceSyntax):
    """``$name`` variables."""

    name = "scss"
    _pattern = re.compile(r"^\$([A-Za-z_][A-Za-z0-9_-]*)$")

    def format(self, reference: Reference) -> str:
        return f"${self.variable_name(reference.path)}"


DTCG_REFERENCES = DTCGReferenceSyntax()


def _rebase_value(value: Any, fn: Callable[[Reference], Reference]) -> Any:
    if isinstance(value, str):
        if not DTCG_REFERENCES.matches(value):
            return value
        try:
            reference = DTCG_REFERENCES.parse(value)
        except TokenPathError:
            # Left as written; decoding the token reports the bad path
            return value
        return fn(reference).to_dtcg()
    if isinstance(value, list):
        return [_rebase_value(item, fn) for item in value]
    if isinstance(value, dict):
        return {key: _rebase_value(item, fn) for key, item in value.items()}
    return value


def rebase_aliases(mapping: dict, fn: Callable[[Reference], Reference]) -> dict:
    """
    Copy of a raw DTCG mapping with every ``{path}`` alias inside a
    ``$value`` replaced by ``fn(reference)``.

    Used to move aliases between absolute paths and paths relative to a
    subtree, e.g. the tokens of one modifier context.
    """
    result = {}
    for name, raw in mapping.items():
        if name == "$value":
            result[name] = _rebase_value(raw, fn)
        elif isinstance(raw, dict) and (not name.startswith("$") or name == ROOT_TOKEN_NAME):
            result[name] = rebase_aliases(raw, fn)
        else:
            result[name] = raw
    return result


# =============================================================================
# JSON Decoding
# =============================================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_number(text: str):
    if not _NUMBER_RE.match(text):
        return None
    number = float(text)
    if number.is_integer() and not any(c in text for c in ".eE"):
        return int(number)
    return number


def _fail(token_type: TokenType, reason: str, field: str = ""):
    raise TokenValueError(token_type.value, reason, field)


def _decode_color(raw, strict):
    if isinstance(raw, str):
        if strict:
            _fail(TokenType.COLOR, "expected a color object with colorSpace and components")
        return parse_color(raw)
    if not isinstance(raw, dict):
        _fail(TokenType.COLOR, f"expected an object, got {type(raw).__name__}")

    space = raw.get("colorSpace")
    if space not in COLOR_SPACES:
        _fail(TokenType.COLOR, f"unsupported color space {space!r}", "colorSpace")
    components = raw.get("components")
    if not isinstance(components, list) or len(components) != 3:
        _fail(TokenType.COLOR, "components must be a list of three entries", "components")
    for component in components:
        if component != NONE and not _is_number(component):
            _fail(TokenType.COLOR, f"invalid component {component!r}", "components")
    alpha = raw.get("alpha")
    if alpha is not None and not (_is_number(alpha) and 0 <= alpha <= 1):
        _fail(TokenType.COLOR, "alpha must be a number in [0, 1]", "alpha")

    color = ColorValue(space, tuple(components), alpha)
    given_hex = raw.get("hex")
    if given_hex is None:
        return color
    expected = color.to_hex() if alpha is None else None
    parsed = try_parse_color(given_hex) if isinstance(given_hex, str) else None
    if expected is None or parsed is None or parsed.hex != expected:
        logger.debug(f"Dropping hex {given_hex!r} inconsistent with {space} components")
        return color
    return ColorValue(space, tuple(components), alpha, expected)


def _decode_measure(token_type, value_class, pattern):
    def decode(raw, strict):
        if isinstance(raw, dict):
            value, unit = raw.get("value"), raw.get("unit")
            if not _is_number(value):
                _fail(token_type, "value must be a number", "value")
            return value_class(value, unit)
        if isinstance(raw, str) and not strict:
            match = pattern.match(raw.strip())
            if match:
                return value_class(_parse_number(match.group(1)), match.group(2))
            _fail(token_type, f"cannot parse {raw!r}")
        _fail(token_type, "expected an object with value and unit")
    return decode


def _decode_number(raw, strict):
    if _is_number(raw):
        return raw
    if isinstance(raw, str) and not strict:
        number = _parse_number(raw.strip())
        if number is not None:
            return number
    _fail(TokenType.NUMBER, f"expected a number, got {raw!r}")


def _decode_font_family(raw, strict):
    if isinstance(raw, str) and raw.strip():
        return raw
    if isinstance(raw, list) and raw and all(isinstance(name, str) and name.strip() for name in raw):
        return list(raw)
    _fail(TokenType.FONT_FAMILY, "expected a font name or a non-empty list of names")


def _decode_font_weight(raw, strict):
    if isinstance(raw, str) and not strict and _parse_number(raw.strip()) is not None:
        raw = _parse_number(raw.strip())
    if _is_number(raw):
        if not 1 <= raw <= 1000:
            _fail(TokenType.FONT_WEIGHT, "numeric weight must be in [1, 1000]")
        return raw
    if isinstance(raw, str) and raw in FONT_WEIGHT_KEYWORDS:
        return raw
    _fail(TokenType.FONT_WEIGHT, f"unknown font weight {raw!r}")


def _decode_cubic_bezier(raw, strict):
    if isinstance(raw, str) and not strict:
        match = _CUBIC_BEZIER_RE.match(raw.strip())
        if not match:
            _fail(TokenType.CUBIC_BEZIER, f"cannot parse {raw!r}")
        raw = [_parse_number(group) for group in match.groups()]
    if not isinstance(raw, list) or len(raw) != 4 or not all(_is_number(p) for p in raw):
        _fail(TokenType.CUBIC_BEZIER, "expected an array of four numbers")
    return CubicBezierValue(*raw)


def _decode_part(parent: TokenType, part_type: TokenType, raw, strict, field: str):
    """Decode one composite part, prefixing errors with its field path."""
    try:
        return decode_json(part_type, raw, strict)
    except TokenValueError as exc:
        inner = f"{field}.{exc.field}" if exc.field else field
        raise TokenValueError(parent.value, exc.reason, inner) from exc


def _decode_stroke_style(raw, strict):
    if isinstance(raw, str):
        if raw not in STROKE_STYLE_KEYWORDS:
            _fail(TokenType.STROKE_STYLE, f"unknown keyword {raw!r}")
        return StrokeStyleValue(raw)
    if not isinstance(raw, dict):
        _fail(TokenType.STROKE_STYLE, "expected a keyword or an object")

    dash_array = raw.get("dashArray")
    if dash_array is None:
        if strict:
            _fail(TokenType.STROKE_STYLE, "missing field", "dashArray")
    elif not isinstance(dash_array, list) or not dash_array:
        _fail(TokenType.STROKE_STYLE, "expected a non-empty array", "dashArray")
    else:
        dash_array = [
            _decode_part(TokenType.STROKE_STYLE, TokenType.DIMENSION, item, strict, f"dashArray[{i}]")
            for i, item in enumerate(dash_array)
        ]
    line_cap = raw.get("lineCap")
    if line_cap is None and strict:
        _fail(TokenType.STROKE_STYLE, "missing field", "lineCap")
    if line_cap is not None and line_cap not in LINE_CAPS:
        _fail(TokenType.STROKE_STYLE, f"unknown line cap {line_cap!r}", "lineCap")
    return StrokeStyleValue(None, dash_array, line_cap)


def _decode_record(token_type: TokenType, cls, raw, strict, prefix: str = "") -> dict:
    """Decode the part fields of a composite into constructor kwargs."""
    if not isinstance(raw, dict):
        _fail(token_type, f"expected an object, got {type(raw).__name__}", prefix)
    kwargs = {}
    for name, key, part_type in part_fields(cls):
        field = f"{prefix}.{key}" if prefix else key
        if key not in raw:
            if strict:
                _fail(token_type, "missing field", field)
            kwargs[name] = None
            continue
        kwargs[name] = _decode_part(token_type, part_type, raw[key], strict, field)
    return kwargs


def _decode_composite(token_type, cls):
    def decode(raw, strict):
        return cls(**_decode_record(token_type, cls, raw, strict))
    return decode


def _decode_shadow(raw, strict):
    layers = [raw] if isinstance(raw, dict) else raw
    if not isinstance(layers, list) or not layers:
        _fail(TokenType.SHADOW, "expected a shadow object or a non-empty array of them")
    result = []
    for index, layer in enumerate(layers):
        prefix = f"[{index}]" if isinstance(raw, list) else ""
        kwargs = _decode_record(TokenType.SHADOW, ShadowValue, layer, strict, prefix)
        inset = layer.get("inset", False)
        if not isinstance(inset, bool):
            _fail(TokenType.SHADOW, "inset must be a boolean", f"{prefix}.inset" if prefix else "inset")
        result.append(ShadowValue(inset=inset, **kwargs))
    return result


def _decode_gradient(raw, strict):
    if not isinstance(raw, list) or not raw:
        _fail(TokenType.GRADIENT, "expected a non-empty array of stops")
    stops = []
    for index, stop in enumerate(raw):
        kwargs = _decode_record(TokenType.GRADIENT, GradientStop, stop, strict, f"[{index}]")
        try:
            stops.append(GradientStop(**kwargs))
        except TokenValueError as exc:
            raise TokenValueError("gradient", exc.reason, f"[{index}].{exc.field}") from exc
    return stops


_DECODERS: dict[TokenType, Callable[[Any, bool], Any]] = {
    TokenType.COLOR: _decode_color,
    TokenType.DIMENSION: _decode_measure(TokenType.DIMENSION, DimensionValue, _DIMENSION_RE),
    TokenType.DURATION: _decode_measure(TokenType.DURATION, DurationValue, _DURATION_RE),
    TokenType.NUMBER: _decode_number,
    TokenType.FONT_FAMILY: _decode_font_family,
    TokenType.FONT_WEIGHT: _decode_font_weight,
    TokenType.CUBIC_BEZIER: _decode_cubic_bezier,
    TokenType.STROKE_STYLE: _decode_stroke_style,
    TokenType.BORDER: _decode_composite(TokenType.BORDER, BorderValue),
    TokenType.TRANSITION: _decode_composite(TokenType.TRANSITION, TransitionValue),
    TokenType.TYPOGRAPHY: _decode_composite(TokenType.TYPOGRAPHY, TypographyValue),
    TokenType.SHADOW: _decode_shadow,
    TokenType.GRADIENT: _decode_gradient,
}


def decode_json(token_type: TokenType, raw: Any, strict: bool = True) -> Any:
    """
    Decode a DTCG ``$value`` payload for ``token_type``.

    Args:
        token_type: Declared type of the token (or of the composite part)
        raw: Decoded JSON value
        strict: True for the 2025 format, False to accept 2022 shorthands

    Returns:
        The typed value, or a Reference for ``{path}`` strings

    Raises:
        TokenValueError: If ``raw`` does not match the shape of the type
    """
    if isinstance(raw, str):
        try:
            reference = DTCG_REFERENCES.parse(raw)
        except TokenPathError as exc:
            raise TokenValueError(token_type.value, f"invalid reference {raw!r}: {exc.reason}") from exc
        if reference is not None:
            return reference
    return _DECODERS[token_type](raw, strict)


# =============================================================================
# JSON Encoding
# =============================================================================

def _encode_stroke_style(value: StrokeStyleValue):
    if value.is_keyword:
        return value.style
    result = {}
    if value.dash_array is not None:
        result["dashArray"] = [encode_json(TokenType.DIMENSION, item) for item in value.dash_array]
    if value.line_cap is not None:
        result["lineCap"] = value.line_cap
    return result


def _encode_record(value) -> dict:
    result = {}
    for name, key, part_type in part_fields(value):
        part = getattr(value, name)
        if part is not None:
            result[key] = encode_json(part_type, part)
    if isinstance(value, ShadowValue):
        result["inset"] = value.inset
    return result


def _encode_shadow(layers):
    encoded = [_encode_record(layer) for layer in layers]
    return encoded[0] if len(encoded) == 1 else encoded


_ENCODERS: dict[TokenType, Callable[[Any], Any]] = {
    TokenType.COLOR: lambda value: value.to_dtcg(),
    TokenType.DIMENSION: lambda value: value.to_dtcg(),
    TokenType.DURATION: lambda value: value.to_dtcg(),
    TokenType.NUMBER: lambda value: value,
    TokenType.FONT_FAMILY: lambda value: list(value) if isinstance(value, list) else value,
    TokenType.FONT_WEIGHT: lambda value: value,
    TokenType.CUBIC_BEZIER: lambda value: value.to_dtcg(),
    TokenType.STROKE_STYLE: _encode_stroke_style,
    TokenType.BORDER: _encode_record,
    TokenType.TRANSITION: _encode_record,
    TokenType.TYPOGRAPHY: _encode_record,
    TokenType.SHADOW: _encode_shadow,
    TokenType.GRADIENT: lambda stops: [_encode_record(stop) for stop in stops],
}


def encode_json(token_type: TokenType, value: Any) -> Any:
    """Encode a typed value (or Reference) as a DTCG 2025 ``$value`` payload."""
    if isinstance(value, Reference):
        return value.to_dtcg()
    if value is None:
        return None
    return _ENCODERS[token_type](value)


# =============================================================================
# CSS Formatting
# =============================================================================

def _quote_font(name: str) -> str:
    if " " in name and name[:1] not in ("'", '"'):
        return f'"{name}"'
    return name


def _format_font_family(value, refs) -> str:
    names = value if isinstance(value, list) else [value]
    return ", ".join(_quote_font(name) for name in names)


def _css_part(part_type: TokenType, value, refs) -> Optional[str]:
    if value is None:
        return None
    return format_css(part_type, value, refs)


def _join(*pieces: Optional[str]) -> str:
    return " ".join(piece for piece in pieces if piece)


def _format_stroke_style(value: StrokeStyleValue, refs) -> str:
    # Custom dash patterns have no CSS keyword equivalent
    return value.style if value.is_keyword else "dashed"


def _format_dash_array(value: StrokeStyleValue, refs) -> str:
    return ", ".join(_css_part(TokenType.DIMENSION, item, refs) or "" for item in value.dash_array)


def _format_shadow(layers, refs) -> str:
    rendered = []
    for layer in layers:
        rendered.append(_join(
            "inset" if layer.inset else None,
            _css_part(TokenType.DIMENSION, layer.offset_x, refs),
            _css_part(TokenType.DIMENSION, layer.offset_y, refs),
            _css_part(TokenType.DIMENSION, layer.blur, refs),
            _css_part(TokenType.DIMENSION, layer.spread, refs),
            _css_part(TokenType.COLOR, layer.color, refs),
        ))
    return ", ".join(rendered)


def _format_gradient(stops, refs) -> str:
    rendered = []
    for stop in stops:
        position = stop.position
        if isinstance(position, Reference):
            position = refs.format(position)
        elif position is not None:
            position = f"{format_number(round(position * 100, 6))}%"
        rendered.append(_join(_css_part(TokenType.COLOR, stop.color, refs), position))
    return f"linear-gradient(90deg, {', '.join(rendered)})"


def _format_border(value: BorderValue, refs) -> str:
    return _join(
        _css_part(TokenType.DIMENSION, value.width, refs),
        _css_part(TokenType.STROKE_STYLE, value.style, refs),
        _css_part(TokenType.COLOR, value.color, refs),
    )


def _format_transition(value: TransitionValue, refs) -> str:
    return _join(
        _css_part(TokenType.DURATION, value.duration, refs),
        _css_part(TokenType.CUBIC_BEZIER, value.timing_function, refs),
        _css_part(TokenType.DURATION, value.delay, refs),
    )


def _format_typography(value: TypographyValue, refs) -> str:
    size = _css_part(TokenType.DIMENSION, value.font_size, refs)
    line_height = _css_part(TokenType.NUMBER, value.line_height, refs)
    if size and line_height:
        size = f"{size}/{line_height}"
    return _join(
        _css_part(TokenType.FONT_WEIGHT, value.font_weight, refs),
        size,
        _css_part(TokenType.FONT_FAMILY, value.font_family, refs),
    )


_CSS_FORMATTERS: dict[TokenType, Callable[[Any, ReferenceSyntax], str]] = {
    TokenType.COLOR: lambda value, refs: serialize_color(value),
    TokenType.DIMENSION: lambda value, refs: value.to_css(),
    TokenType.DURATION: lambda value, refs: value.to_css(),
    TokenType.NUMBER: lambda value, refs: format_number(value),
    TokenType.FONT_FAMILY: _format_font_family,
    TokenType.FONT_WEIGHT: lambda value, refs: format_number(value) if _is_number(value) else value,
    TokenType.CUBIC_BEZIER: lambda value, refs: value.to_css(),
    TokenType.STROKE_STYLE: _format_stroke_style,
    TokenType.BORDER: _format_border,
    TokenType.TRANSITION: _format_transition,
    TokenType.TYPOGRAPHY: _format_typography,
    TokenType.SHADOW: _format_shadow,
    TokenType.GRADIENT: _format_gradient,
}


def format_css(token_type: TokenType, value: Any, references: ReferenceSyntax) -> str:
    """
    Render a value as CSS/SCSS text.

    Composites become their shorthand (``1px solid #000``); references are
    written with ``references`` (``var(--x)`` or ``$x``).
    """
    if isinstance(value, Reference):
        return references.format(value)
    return _CSS_FORMATTERS[token_type](value, references)


def css_declarations(
    name: str,
    token_type: TokenType,
    value: Any,
    references: ReferenceSyntax,
    expand: bool = True,
) -> list[tuple[str, str]]:
    """
    ``(variable name, value text)`` pairs for one token.

    With ``expand``, typography, border, transition and custom stroke styles
    first emit one declaration per sub-property, then the shorthand.
    """
    shorthand = (name, format_css(token_type, value, references))
    if not expand or isinstance(value, Reference):
        return [shorthand]

    subs: list[tuple[str, Optional[str]]] = []
    if token_type == TokenType.TRANSITION:
        subs = [
            ("duration", _css_part(TokenType.DURATION, value.duration, references)),
            ("delay", _css_part(TokenType.DURATION, value.delay, references)),
            ("timing-function", _css_part(TokenType.CUBIC_BEZIER, value.timing_function, references)),
        ]
    elif token_type == TokenType.BORDER:
        subs = [
            ("color", _css_part(TokenType.COLOR, value.color, references)),
            ("width", _css_part(TokenType.DIMENSION, value.width, references)),
            ("style", _css_part(TokenType.STROKE_STYLE, value.style, references)),
        ]
    elif token_type == TokenType.TYPOGRAPHY:
        subs = [
            ("font-family", _css_part(TokenType.FONT_FAMILY, value.font_family, references)),
            ("font-size", _css_part(TokenType.DIMENSION, value.font_size, references)),
            ("font-weight", _css_part(TokenType.FONT_WEIGHT, value.font_weight, references)),
            ("line-height", _css_part(TokenType.NUMBER, value.line_height, references)),
            ("letter-spacing", _css_part(TokenType.DIMENSION, value.letter_spacing, references)),
        ]
    elif token_type == TokenType.STROKE_STYLE and not value.is_keyword:
        subs = [
            ("dash-array", _format_dash_array(value, references) if value.dash_array else None),
            ("line-cap", value.line_cap),
        ]

    declarations = [(f"{name}-{suffix}", text) for suffix, text in subs if text]
    declarations.append(shorthand)
    return declarations


# =============================================================================
# CSS Value Inference
# =============================================================================

def _split_font_list(text: str) -> Optional[list[str]]:
    names = [name.strip() for name in text.split(",")]
    if not all(_FONT_NAME_RE.match(name) for name in names):
        return None
    return [name.strip("\"'") if name[:1] in "\"'" else name for name in names]


def infer_css_value(text: str) -> Optional[tuple[TokenType, Any]]:
    """
    Classify a raw CSS value by its shape.

    Tried in order: color syntax, ``px|rem`` length, ``ms|s`` time, bare
    number, ``cubic-bezier()``, stroke keyword, font-weight keyword and
    finally a font-family list.

    Returns:
        ``(type, value)``, or None when no shape matches

    Raises:
        TokenValueError: If the value has a known shape but invalid content
            (e.g. a cubic-bezier x coordinate outside [0, 1])
    """
    text = text.strip()
    if not text:
        return None

    color = try_parse_color(text)
    if color is not None:
        return TokenType.COLOR, color

    for token_type, value_class, pattern in (
        (TokenType.DIMENSION, DimensionValue, _DIMENSION_RE),
        (TokenType.DURATION, DurationValue, _DURATION_RE),
    ):
        match = pattern.match(text)
        if match:
            return token_type, value_class(_parse_number(match.group(1)), match.group(2))

    number = _parse_number(text)
    if number is not None:
        return TokenType.NUMBER, number

    if text.startswith("cubic-bezier("):
        return TokenType.CUBIC_BEZIER, _decode_cubic_bezier(text, strict=False)

    if text in STROKE_STYLE_KEYWORDS:
        return TokenType.STROKE_STYLE, StrokeStyleValue(text)
    if text in FONT_WEIGHT_KEYWORDS:
        return TokenType.FONT_WEIGHT, text

    names = _split_font_list(text)
    if names:
        return TokenType.FONT_FAMILY, names[0] if len(names) == 1 else names
    return None
