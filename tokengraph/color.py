"""
Color Parsing - CSS Color Level 4 literals to DTCG color values

Turns any CSS color literal into the canonical design-token color shape:

    {colorSpace, components: [c1, c2, c3], alpha?, hex?}

Supported syntaxes:
- Hex: #rgb, #rgba, #rrggbb, #rrggbbaa
- rgb()/rgba() and hsl()/hsla() in modern and legacy (comma) form
- hwb(), lab(), lch(), oklab(), oklch()
- color(<space> c1 c2 c3 [/ alpha]) for the predefined RGB and XYZ spaces
- Named colors (``red``, ``rebeccapurple``, ...) and ``transparent``

``parse_color`` never raises: anything it cannot read becomes transparent
black, so a bad literal in a token file can never break rendering.

References:
- CSS Color 4: https://www.w3.org/TR/css-color-4/
- DTCG Color Module: https://www.designtokens.org/tr/2025.10/color/
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

Component = Union[float, str]  # a number or the "none" keyword

COLOR_SPACES = (
    "srgb",
    "srgb-linear",
    "hsl",
    "hwb",
    "lab",
    "lch",
    "oklab",
    "oklch",
    "display-p3",
    "a98-rgb",
    "prophoto-rgb",
    "rec2020",
    "xyz-d65",
    "xyz-d50",
)

NONE = "none"


@dataclass(frozen=True)
class ColorValue:
    """
    A color in one of the 14 DTCG color spaces.

    ``alpha`` is None when the source did not specify one, which is not the
    same as an explicit ``1``. ``hex`` is only set for in-gamut sRGB colors
    without alpha or missing components.
    """
    color_space: str = "srgb"
    components: tuple[Component, Component, Component] = (0.0, 0.0, 0.0)
    alpha: Optional[float] = None
    hex: Optional[str] = None

    def __post_init__(self):
        if self.color_space not in COLOR_SPACES:
            raise ValueError(f"Unsupported color space: {self.color_space}")
        components = tuple(self.components)
        if len(components) != 3:
            raise ValueError(f"Color needs exactly 3 components, got {len(components)}")
        for component in components:
            if component != NONE and (
                isinstance(component, bool) or not isinstance(component, (int, float))
            ):
                raise ValueError(f"Invalid color component: {component!r}")
        object.__setattr__(self, "components", components)

    @classmethod
    def from_hex(cls, hex_color: str) -> "ColorValue":
        """Create from a hex string, with or without the leading '#'."""
        text = hex_color.strip().lower()
        if not text.startswith("#"):
            text = "#" + text
        color = _parse_hex(text)
        if color is None:
            raise ValueError(f"Invalid hex color: {hex_color}")
        return color

    @property
    def has_missing_components(self) -> bool:
        return any(c == NONE for c in self.components)

    def to_hex(self) -> Optional[str]:
        """Hex form (#rrggbb or #rrggbbaa) when the color is in-gamut sRGB."""
        if not _is_hex_representable(self.color_space, self.components):
            return None
        hex_str = _channels_to_hex(self.components)
        if self.alpha is not None and self.alpha < 1:
            hex_str += f"{round(self.alpha * 255):02x}"
        return hex_str

    def to_css(self) -> str:
        """CSS Color 4 text for this color."""
        return serialize_color(self)

    def to_dtcg(self) -> dict:
        """Export to DTCG color format, omitting absent alpha and hex."""
        result = {
            "colorSpace": self.color_space,
            "components": list(self.components),
        }
        if self.alpha is not None:
            result["alpha"] = self.alpha
        if self.hex is not None:
            result["hex"] = self.hex
        return result


# Fully transparent black: the result for every unparseable literal
TRANSPARENT = ColorValue("srgb", (0.0, 0.0, 0.0), alpha=0.0)


class _ColorSyntaxError(ValueError):
    """Internal signal: the literal does not match the color grammar."""


# =============================================================================
# Scalars
# =============================================================================

_NUMBER = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?"
_SCALAR_RE = re.compile(rf"^({_NUMBER})(%|deg|rad|grad|turn)?$")
_HEX_RE = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$")
_FUNCTION_RE = re.compile(r"^([a-z][a-z0-9-]*)\((.*)\)$", re.DOTALL)

Normalizer = Callable[[float, str], float]


def _read_scalar(token: str) -> tuple[float, str]:
    match = _SCALAR_RE.match(token)
    if not match:
        raise _ColorSyntaxError(token)
    return float(match.group(1)), match.group(2) or ""


def _rgb_channel(number: float, unit: str) -> float:
    if unit == "%":
        return number / 100
    if unit == "":
        return number / 255
    raise _ColorSyntaxError(unit)


def _scaled(percent_reference: float) -> Normalizer:
    """Numbers pass through; 100% maps to ``percent_reference``."""
    def normalize(number: float, unit: str) -> float:
        if unit == "%":
            return number * percent_reference / 100
        if unit == "":
            return number
        raise _ColorSyntaxError(unit)
    return normalize


def _hue(number: float, unit: str) -> float:
    if unit in ("", "deg"):
        return number
    if unit == "rad":
        return math.degrees(number)
    if unit == "grad":
        return number * 0.9
    if unit == "turn":
        return number * 360
    raise _ColorSyntaxError(unit)


def _alpha(number: float, unit: str) -> float:
    if unit == "%":
        number = number / 100
    elif unit != "":
        raise _ColorSyntaxError(unit)
    return min(1.0, max(0.0, number))


_unit_interval = _scaled(1.0)
_percent = _scaled(100.0)

# function name -> (color space, per-channel normalizers, legacy comma syntax allowed)
_FUNCTIONS: dict[str, tuple[str, tuple[Normalizer, Normalizer, Normalizer], bool]] = {
    "rgb": ("srgb", (_rgb_channel, _rgb_channel, _rgb_channel), True),
    "rgba": ("srgb", (_rgb_channel, _rgb_channel, _rgb_channel), True),
    "hsl": ("hsl", (_hue, _percent, _percent), True),
    "hsla": ("hsl", (_hue, _percent, _percent), True),
    "hwb": ("hwb", (_hue, _percent, _percent), False),
    "lab": ("lab", (_percent, _scaled(125.0), _scaled(125.0)), False),
    "lch": ("lch", (_percent, _scaled(150.0), _hue), False),
    "oklab": ("oklab", (_unit_interval, _scaled(0.4), _scaled(0.4)), False),
    "oklch": ("oklch", (_unit_interval, _scaled(0.4), _hue), False),
}

# color() space identifiers -> DTCG color space
_PREDEFINED_SPACES = {
    "srgb": "srgb",
    "srgb-linear": "srgb-linear",
    "display-p3": "display-p3",
    "a98-rgb": "a98-rgb",
    "prophoto-rgb": "prophoto-rgb",
    "rec2020": "rec2020",
    "xyz": "xyz-d65",
    "xyz-d65": "xyz-d65",
    "xyz-d50": "xyz-d50",
}


# CSS Color 4 named colors; "transparent" is handled separately
_NAMED_COLORS = {
    "aliceblue": "#f0f8ff",
    "antiquewhite": "#faebd7",
    "aqua": "#00ffff",
    "aquamarine": "#7fffd4",
    "azure": "#f0ffff",
    "beige": "#f5f5dc",
    "bisque": "#ffe4c4",
    "black": "#000000",
    "blanchedalmond": "#ffebcd",
    "blue": "#0000ff",
    "blueviolet": "#8a2be2",
    "brown": "#a52a2a",
    "burlywood": "#deb887",
    "cadetblue": "#5f9ea0",
    "chartreuse": "#7fff00",
    "chocolate": "#d2691e",
    "coral": "#ff7f50",
    "cornflowerblue": "#6495ed",
    "cornsilk": "#fff8dc",
    "crimson": "#dc143c",
    "cyan": "#00ffff",
    "darkblue": "#00008b",
    "darkcyan": "#008b8b",
    "darkgoldenrod": "#b8860b",
    "darkgray": "#a9a9a9",
    "darkgreen": "#006400",
    "darkgrey": "#a9a9a9",
    "darkkhaki": "#bdb76b",
    "darkmagenta": "#8b008b",
    "darkolivegreen": "#556b2f",
    "darkorange": "#ff8c00",
    "darkorchid": "#9932cc",
    "darkred": "#8b0000",
    "darksalmon": "#e9967a",
    "darkseagreen": "#8fbc8f",
    "darkslateblue": "#483d8b",
    "darkslategray": "#2f4f4f",
    "darkslategrey": "#2f4f4f",
    "darkturquoise": "#00ced1",
    "darkviolet": "#9400d3",
    "deeppink": "#ff1493",
    "deepskyblue": "#00bfff",
    "dimgray": "#696969",
    "dimgrey": "#696969",
    "dodgerblue": "#1e90ff",
    "firebrick": "#b22222",
    "floralwhite": "#fffaf0",
    "forestgreen": "#228b22",
    "fuchsia": "#ff00ff",
    "gainsboro": "#dcdcdc",
    "ghostwhite": "#f8f8ff",
    "gold": "#ffd700",
    "goldenrod": "#daa520",
    "gray": "#808080",
    "green": "#008000",
    "greenyellow": "#adff2f",
    "grey": "#808080",
    "honeydew": "#f0fff0",
    "hotpink": "#ff69b4",
    "indianred": "#cd5c5c",
    "indigo": "#4b0082",
    "ivory": "#fffff0",
    "khaki": "#f0e68c",
    "lavender": "#e6e6fa",
    "lavenderblush": "#fff0f5",
    "lawngreen": "#7cfc00",
    "lemonchiffon": "#fffacd",
    "lightblue": "#add8e6",
    "lightcoral": "#f08080",
    "lightcyan": "#e0ffff",
    "lightgoldenrodyellow": "#fafad2",
    "lightgray": "#d3d3d3",
    "lightgreen": "#90ee90",
    "lightgrey": "#d3d3d3",
    "lightpink": "#ffb6c1",
    "lightsalmon": "#ffa07a",
    "lightseagreen": "#20b2aa",
    "lightskyblue": "#87cefa",
    "lightslategray": "#778899",
    "lightslategrey": "#778899",
    "lightsteelblue": "#b0c4de",
    "lightyellow": "#ffffe0",
    "lime": "#00ff00",
    "limegreen": "#32cd32",
    "linen": "#faf0e6",
    "magenta": "#ff00ff",
    "maroon": "#800000",
    "mediumaquamarine": "#66cdaa",
    "mediumblue": "#0000cd",
    "mediumorchid": "#ba55d3",
    "mediumpurple": "#9370db",
    "mediumseagreen": "#3cb371",
    "mediumslateblue": "#7b68ee",
    "mediumspringgreen": "#00fa9a",
    "mediumturquoise": "#48d1cc",
    "mediumvioletred": "#c71585",
    "midnightblue": "#191970",
    "mintcream": "#f5fffa",
    "mistyrose": "#ffe4e1",
    "moccasin": "#ffe4b5",
    "navajowhite": "#ffdead",
    "navy": "#000080",
    "oldlace": "#fdf5e6",
    "olive": "#808000",
    "olivedrab": "#6b8e23",
    "orange": "#ffa500",
    "orangered": "#ff4500",
    "orchid": "#da70d6",
    "palegoldenrod": "#eee8aa",
    "palegreen": "#98fb98",
    "paleturquoise": "#afeeee",
    "palevioletred": "#db7093",
    "papayawhip": "#ffefd5",
    "peachpuff": "#ffdab9",
    "peru": "#cd853f",
    "pink": "#ffc0cb",
    "plum": "#dda0dd",
    "powderblue": "#b0e0e6",
    "purple": "#800080",
    "rebeccapurple": "#663399",
    "red": "#ff0000",
    "rosybrown": "#bc8f8f",
    "royalblue": "#4169e1",
    "saddlebrown": "#8b4513",
    "salmon": "#fa8072",
    "sandybrown": "#f4a460",
    "seagreen": "#2e8b57",
    "seashell": "#fff5ee",
    "sienna": "#a0522d",
    "silver": "#c0c0c0",
    "skyblue": "#87ceeb",
    "slateblue": "#6a5acd",
    "slategray": "#708090",
    "slategrey": "#708090",
    "snow": "#fffafa",
    "springgreen": "#00ff7f",
    "steelblue": "#4682b4",
    "tan": "#d2b48c",
    "teal": "#008080",
    "thistle": "#d8bfd8",
    "tomato": "#ff6347",
    "turquoise": "#40e0d0",
    "violet": "#ee82ee",
    "wheat": "#f5deb3",
    "white": "#ffffff",
    "whitesmoke": "#f5f5f5",
    "yellow": "#ffff00",
    "yellowgreen": "#9acd32",
}


# =============================================================================
# Grammar
# =============================================================================

def _is_hex_representable(color_space: str, components) -> bool:
    return color_space == "srgb" and all(
        c != NONE and 0 <= c <= 1 for c in components
    )


def _channels_to_hex(components) -> str:
    return "#" + "".join(f"{round(c * 255):02x}" for c in components)


def _finish(color_space: str, components: list[Component], alpha: Optional[float]) -> ColorValue:
    hex_value = None
    if alpha is None and _is_hex_representable(color_space, components):
        hex_value = _channels_to_hex(components)
    return ColorValue(color_space, tuple(components), alpha, hex_value)


def _parse_hex(text: str) -> Optional[ColorValue]:
    match = _HEX_RE.match(text)
    if not match:
        return None
    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(d * 2 for d in digits)
    channels = [int(digits[i:i + 2], 16) / 255 for i in range(0, len(digits), 2)]
    alpha = channels[3] if len(channels) == 4 else None
    return _finish("srgb", channels[:3], alpha)


def _split_arguments(body: str, legacy_allowed: bool) -> tuple[list[str], Optional[str]]:
    """Split a function body into channel tokens and an optional alpha token."""
    body = body.strip()
    if "," in body:
        if not legacy_allowed or "/" in body:
            raise _ColorSyntaxError(body)
        parts = [part.strip() for part in body.split(",")]
        if len(parts) not in (3, 4) or any(not part or NONE in part for part in parts):
            raise _ColorSyntaxError(body)
        return parts[:3], (parts[3] if len(parts) == 4 else None)

    if body.count("/") > 1:
        raise _ColorSyntaxError(body)
    channels, slash, alpha = body.partition("/")
    alpha = alpha.strip()
    if slash and not alpha:
        raise _ColorSyntaxError(body)
    return channels.split(), (alpha if slash else None)


def _normalize_channels(tokens: list[str], normalizers) -> list[Component]:
    if len(tokens) != 3:
        raise _ColorSyntaxError(" ".join(tokens))
    components: list[Component] = []
    for token, normalize in zip(tokens, normalizers):
        if token == NONE:
            components.append(NONE)
        else:
            components.append(normalize(*_read_scalar(token)))
    return components


def _normalize_alpha(token: Optional[str]) -> Optional[float]:
    if token is None or token == NONE:
        return None
    return _alpha(*_read_scalar(token))


def _parse_function(name: str, body: str) -> ColorValue:
    if name == "color":
        tokens, alpha = _split_arguments(body, legacy_allowed=False)
        if not tokens or tokens[0] not in _PREDEFINED_SPACES:
            raise _ColorSyntaxError(body)
        color_space = _PREDEFINED_SPACES[tokens[0]]
        normalizers = (_unit_interval,) * 3
        tokens = tokens[1:]
    elif name in _FUNCTIONS:
        color_space, normalizers, legacy_allowed = _FUNCTIONS[name]
        tokens, alpha = _split_arguments(body, legacy_allowed)
    else:
        raise _ColorSyntaxError(name)

    components = _normalize_channels(tokens, normalizers)
    return _finish(color_space, components, _normalize_alpha(alpha))


def try_parse_color(text: str) -> Optional[ColorValue]:
    """
    Parse a CSS color literal, returning None when it is not valid color syntax.

    Args:
        text: A CSS color literal such as ``#0af``, ``rgb(0 0 0 / 50%)`` or
            ``color(display-p3 1 0 0)``

    Returns:
        The normalized ColorValue, or None for unrecognized input
    """
    if not isinstance(text, str):
        return None
    literal = text.strip().lower()
    if literal.startswith("#"):
        return _parse_hex(literal)
    if literal == "transparent":
        return TRANSPARENT
    if literal in _NAMED_COLORS:
        return _parse_hex(_NAMED_COLORS[literal])
    match = _FUNCTION_RE.match(literal)
    if not match:
        return None
    try:
        return _parse_function(match.group(1), match.group(2))
    except _ColorSyntaxError:
        return None


def parse_color(text: str) -> ColorValue:
    """
    Parse a CSS color literal into a ColorValue. Never raises.

    Unrecognized input yields fully transparent black
    (``{colorSpace: "srgb", components: [0, 0, 0], alpha: 0}``).
    """
    color = try_parse_color(text)
    if color is None:
        logger.debug(f"Unparseable color literal {text!r}, using transparent")
        return TRANSPARENT
    return color


# =============================================================================
# Serialization
# =============================================================================

def _number(value: Component, digits: int = 4) -> str:
    if value == NONE:
        return NONE
    rounded = round(float(value), digits)
    if rounded == 0:
        return "0"
    return f"{rounded:.{digits}f}".rstrip("0").rstrip(".")


def _percentage(value: Component, scale: float = 1.0) -> str:
    if value == NONE:
        return NONE
    return f"{_number(float(value) * scale)}%"


def serialize_color(color: ColorValue) -> str:
    """
    Render a ColorValue as CSS Color 4 text.

    sRGB colors carrying a ``hex`` are written as hex; everything else uses the
    function notation of its color space, with ``/ alpha`` when alpha is set.
    """
    if color.hex and color.alpha is None:
        return color.hex

    c1, c2, c3 = color.components
    alpha = f" / {_number(color.alpha)}" if color.alpha is not None else ""
    space = color.color_space

    if space == "srgb":
        channels = " ".join(_percentage(c, 100) for c in (c1, c2, c3))
        return f"rgb({channels}{alpha})"
    if space in ("hsl", "hwb"):
        return f"{space}({_number(c1)} {_percentage(c2)} {_percentage(c3)}{alpha})"
    if space in ("lab", "lch", "oklab", "oklch"):
        return f"{space}({_number(c1)} {_number(c2)} {_number(c3)}{alpha})"
    return f"color({space} {_number(c1)} {_number(c2)} {_number(c3)}{alpha})"
