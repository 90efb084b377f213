"""
Tests for the color parser (color.py).

Tests:
- Hex literals and their canonical form
- Functional notations in every supported color space
- Units, alpha handling and the "none" keyword
- Named colors and "transparent"
- Fallback to transparent black for unparseable input
- Serialization back to CSS
"""

import math

import pytest

from tokengraph.color import (
    COLOR_SPACES,
    TRANSPARENT,
    ColorValue,
    parse_color,
    serialize_color,
    try_parse_color,
)


# =============================================================================
# Hex Tests
# =============================================================================

class TestHexColors:
    """Tests for #rgb, #rgba, #rrggbb and #rrggbbaa."""

    def test_short_and_long_forms_match(self):
        """Test that #F00 and #ff0000 parse to the same color."""
        assert parse_color("#F00") == parse_color("#ff0000")

    def test_six_digit_components(self):
        """Test six digit hex maps channels to [0, 1]."""
        color = parse_color("#ff0000")
        assert color.color_space == "srgb"
        assert color.components == (1.0, 0.0, 0.0)
        assert color.alpha is None
        assert color.hex == "#ff0000"

    def test_hex_is_lowercase(self):
        """Test the stored hex is the lowercase six digit form."""
        assert parse_color("#3B82F6").hex == "#3b82f6"
        assert parse_color("#ABC").hex == "#aabbcc"

    def test_four_digit_alpha(self):
        """Test #rgba carries alpha and drops hex."""
        color = parse_color("#0f08")
        assert color.components == (0.0, 1.0, 0.0)
        assert color.alpha == pytest.approx(0x88 / 255)
        assert color.hex is None

    def test_eight_digit_alpha(self):
        """Test #rrggbbaa carries alpha."""
        color = parse_color("#ff000080")
        assert 0.49 < color.alpha < 0.51
        assert color.hex is None

    @pytest.mark.parametrize("literal", ["#gggggg", "#12345", "#1", "#", "ff0000"])
    def test_invalid_hex(self, literal):
        """Test malformed hex literals fall back to transparent black."""
        assert parse_color(literal) == TRANSPARENT


# =============================================================================
# Functional Notation Tests
# =============================================================================

class TestRgb:
    """Tests for rgb() and rgba()."""

    def test_rgba_with_alpha_has_no_hex(self):
        """Test rgba(255 0 0 / 0.5) keeps alpha and omits hex."""
        color = parse_color("rgba(255 0 0 / 0.5)")
        assert color.color_space == "srgb"
        assert color.components == (1.0, 0.0, 0.0)
        assert color.alpha == 0.5
        assert color.hex is None

    def test_modern_syntax_numbers(self):
        """Test numbers are divided by 255."""
        color = parse_color("rgb(255 128 0)")
        assert color.components == pytest.approx((1.0, 128 / 255, 0.0))
        assert color.hex == "#ff8000"

    def test_percentages(self):
        """Test percentages are divided by 100."""
        color = parse_color("rgb(100% 50% 0%)")
        assert color.components == (1.0, 0.5, 0.0)

    def test_legacy_comma_syntax(self):
        """Test legacy comma syntax with alpha."""
        color = parse_color("rgba(255, 0, 0, 0.25)")
        assert color.components == (1.0, 0.0, 0.0)
        assert color.alpha == 0.25

    def test_percentage_alpha(self):
        """Test percentage alpha is normalized."""
        assert parse_color("rgb(0 0 0 / 50%)").alpha == 0.5

    def test_alpha_is_clamped(self):
        """Test alpha above 1 is clamped but still counts as given."""
        color = parse_color("rgb(0 0 0 / 150%)")
        assert color.alpha == 1.0
        assert color.hex is None

    def test_none_alpha_is_unspecified(self):
        """Test '/ none' behaves like no alpha at all."""
        color = parse_color("rgb(0 0 0 / none)")
        assert color.alpha is None
        assert color.hex == "#000000"

    def test_none_component_preserved(self):
        """Test 'none' components are kept verbatim and block hex."""
        color = parse_color("rgb(none 0% 0%)")
        assert color.components[0] == "none"
        assert color.hex is None
        assert color.has_missing_components

    def test_out_of_gamut_has_no_hex(self):
        """Test channels beyond 255 keep their value but lose hex."""
        color = parse_color("rgb(300 0 0)")
        assert color.components[0] > 1
        assert color.hex is None

    def test_case_and_whitespace_insensitive(self):
        """Test input is case-insensitive and whitespace tolerant."""
        assert parse_color("  RGB( 255   0 0 )  ") == parse_color("rgb(255 0 0)")


class TestOtherColorSpaces:
    """Tests for hsl, hwb, lab, lch, oklab, oklch and color()."""

    def test_hsl(self):
        """Test hsl saturation and lightness stay on the 0-100 scale."""
        color = parse_color("hsl(120deg 50% 25%)")
        assert color.color_space == "hsl"
        assert color.components == (120.0, 50.0, 25.0)
        assert color.hex is None

    def test_hsl_legacy(self):
        """Test hsla legacy comma syntax."""
        color = parse_color("hsla(200, 100%, 50%, 0.3)")
        assert color.components == (200.0, 100.0, 50.0)
        assert color.alpha == 0.3

    @pytest.mark.parametrize("hue,expected", [
        ("0.5turn", 180.0),
        ("200grad", 180.0),
        ("90deg", 90.0),
        ("90", 90.0),
    ])
    def test_hue_units(self, hue, expected):
        """Test hue units are converted to degrees."""
        assert parse_color(f"hsl({hue} 50% 50%)").components[0] == pytest.approx(expected)

    def test_hue_radians(self):
        """Test radians are converted to degrees."""
        color = parse_color("oklch(0.7 0.1 1rad)")
        assert color.components[2] == pytest.approx(math.degrees(1))

    def test_hwb(self):
        """Test hwb parsing."""
        color = parse_color("hwb(90 10% 20%)")
        assert color.color_space == "hwb"
        assert color.components == (90.0, 10.0, 20.0)

    def test_lab_percentages(self):
        """Test lab a/b percentages are relative to 125."""
        color = parse_color("lab(50% 100% -100%)")
        assert color.color_space == "lab"
        assert color.components == pytest.approx((50.0, 125.0, -125.0))

    def test_lch_chroma_percentage(self):
        """Test lch chroma percentages are relative to 150."""
        color = parse_color("lch(50 100% 30)")
        assert color.components == pytest.approx((50.0, 150.0, 30.0))

    def test_oklab_lightness(self):
        """Test oklab lightness percentage maps to [0, 1]."""
        color = parse_color("oklab(60% 0.1 -0.1)")
        assert color.color_space == "oklab"
        assert color.components == pytest.approx((0.6, 0.1, -0.1))

    def test_oklch_chroma_percentage(self):
        """Test oklch chroma percentages are relative to 0.4."""
        color = parse_color("oklch(0.7 100% 250)")
        assert color.components == pytest.approx((0.7, 0.4, 250.0))

    def test_oklch_none_hue(self):
        """Test a powerless hue written as none."""
        assert parse_color("oklch(0.5 0 none)").components[2] == "none"

    def test_color_function(self):
        """Test color() with a predefined RGB space."""
        color = parse_color("color(display-p3 1 0.5 0 / 0.8)")
        assert color.color_space == "display-p3"
        assert color.components == (1.0, 0.5, 0.0)
        assert color.alpha == 0.8
        assert color.hex is None

    def test_color_xyz_alias(self):
        """Test color(xyz ...) means xyz-d65."""
        assert parse_color("color(xyz 0.5 0.5 0.5)").color_space == "xyz-d65"

    def test_color_srgb_gets_hex(self):
        """Test color(srgb ...) in gamut carries hex."""
        assert parse_color("color(srgb 1 0 0)").hex == "#ff0000"

    @pytest.mark.parametrize("literal,space", [
        ("#ffffff", "srgb"),
        ("color(srgb-linear 1 0.5 0)", "srgb-linear"),
        ("hsl(0 0% 0%)", "hsl"),
        ("hwb(0 0% 0%)", "hwb"),
        ("lab(50 20 -30)", "lab"),
        ("lch(50 30 200)", "lch"),
        ("oklab(0.5 0.1 0.1)", "oklab"),
        ("oklch(0.5 0.1 120)", "oklch"),
        ("color(display-p3 1 0 0)", "display-p3"),
        ("color(a98-rgb 1 0 0)", "a98-rgb"),
        ("color(prophoto-rgb 1 0 0)", "prophoto-rgb"),
        ("color(rec2020 1 0 0)", "rec2020"),
        ("color(xyz-d65 0.3 0.3 0.3)", "xyz-d65"),
        ("color(xyz-d50 0.3 0.3 0.3)", "xyz-d50"),
    ])
    def test_every_color_space(self, literal, space):
        """Test each supported space parses to its own tag."""
        assert parse_color(literal).color_space == space

    def test_color_spaces_constant(self):
        """Test all 14 spaces are listed."""
        assert len(COLOR_SPACES) == 14


# =============================================================================
# Named Color Tests
# =============================================================================

class TestNamedColors:
    """Tests for CSS named colors and the transparent keyword."""

    @pytest.mark.parametrize("name,hex_value", [
        ("red", "#ff0000"),
        ("white", "#ffffff"),
        ("black", "#000000"),
        ("rebeccapurple", "#663399"),
        ("cornflowerblue", "#6495ed"),
        ("grey", "#808080"),
    ])
    def test_named_colors(self, name, hex_value):
        """Test names parse to srgb with a hex."""
        color = parse_color(name)
        assert color.color_space == "srgb"
        assert color.hex == hex_value
        assert color.alpha is None

    def test_case_and_whitespace(self):
        """Test names are matched case-insensitively."""
        assert parse_color("  RebeccaPurple ") == parse_color("#663399")

    def test_transparent(self):
        """Test transparent is srgb black with alpha 0."""
        color = parse_color("transparent")
        assert color == TRANSPARENT
        assert color.components == (0.0, 0.0, 0.0)
        assert color.alpha == 0.0
        assert color.hex is None

    def test_try_parse_named(self):
        """Test names are valid syntax, not a fallback."""
        assert try_parse_color("white") is not None
        assert try_parse_color("transparent") is not None

    def test_serializes_as_hex(self):
        """Test a named color is written back as hex."""
        assert serialize_color(parse_color("teal")) == "#008080"


# =============================================================================
# Failure Policy Tests
# =============================================================================

class TestInvalidInput:
    """Tests for the transparent-black fallback."""

    def test_sentinel_shape(self):
        """Test the fallback is srgb black with alpha 0 and no hex."""
        assert TRANSPARENT == ColorValue("srgb", (0.0, 0.0, 0.0), alpha=0.0)
        assert TRANSPARENT.hex is None

    @pytest.mark.parametrize("literal", [
        "rgb(1 2)",
        "rgb(1 2 3 4)",
        "rgb(1px 2 3)",
        "rgb(1, 2 3)",
        "rgb(none, 0, 0)",
        "rgb(1 2 3 / 0.5 / 0.5)",
        "rgb(1 2 3 /)",
        "hwb(10, 20%, 30%)",
        "hsl(10% 20% 30%)",
        "foo(1 2 3)",
        "color(unknown 1 2 3)",
        "color(display-p3 1 0)",
        "reddish",
        "currentcolor",
        "",
    ])
    def test_unparseable_returns_sentinel(self, literal):
        """Test unrecognized grammar returns transparent black."""
        assert parse_color(literal) == TRANSPARENT

    def test_non_string_input(self):
        """Test non-string input never raises."""
        assert parse_color(None) == TRANSPARENT
        assert parse_color(42) == TRANSPARENT

    def test_try_parse_returns_none(self):
        """Test try_parse_color reports failure as None."""
        assert try_parse_color("nope") is None
        assert try_parse_color("#fff") is not None


# =============================================================================
# ColorValue Tests
# =============================================================================

class TestColorValue:
    """Tests for the ColorValue dataclass."""

    def test_from_hex_without_hash(self):
        """Test from_hex accepts a bare hex string."""
        assert ColorValue.from_hex("00ff00").components == (0.0, 1.0, 0.0)

    def test_from_hex_invalid(self):
        """Test from_hex raises for invalid input."""
        with pytest.raises(ValueError, match="Invalid hex color"):
            ColorValue.from_hex("#zz")

    def test_to_hex_with_alpha(self):
        """Test to_hex appends alpha digits."""
        color = ColorValue(components=(1.0, 0.0, 0.0), alpha=0.5)
        assert color.to_hex() == "#ff000080"

    def test_to_hex_outside_srgb(self):
        """Test to_hex is None for other spaces."""
        assert ColorValue("display-p3", (1.0, 0.0, 0.0)).to_hex() is None

    def test_unknown_space_rejected(self):
        """Test constructing with an unknown space raises."""
        with pytest.raises(ValueError, match="Unsupported color space"):
            ColorValue("cmyk", (0.0, 0.0, 0.0))

    def test_component_count_checked(self):
        """Test exactly three components are required."""
        with pytest.raises(ValueError, match="exactly 3"):
            ColorValue("srgb", (0.0, 0.0))

    def test_to_dtcg_omits_absent_fields(self):
        """Test to_dtcg leaves out alpha and hex when absent."""
        dtcg = parse_color("oklch(0.5 0.1 120)").to_dtcg()
        assert dtcg == {"colorSpace": "oklch", "components": [0.5, 0.1, 120.0]}

    def test_to_dtcg_with_hex(self):
        """Test to_dtcg includes hex for plain sRGB colors."""
        dtcg = parse_color("#3366ff").to_dtcg()
        assert dtcg["hex"] == "#3366ff"
        assert "alpha" not in dtcg


# =============================================================================
# Serialization Tests
# =============================================================================

class TestSerializeColor:
    """Tests for serialize_color."""

    @pytest.mark.parametrize("literal,expected", [
        ("#FF0000", "#ff0000"),
        ("rgba(255 0 0 / 0.5)", "rgb(100% 0% 0% / 0.5)"),
        ("rgb(none 0% 0%)", "rgb(none 0% 0%)"),
        ("hsl(120 50% 25%)", "hsl(120 50% 25%)"),
        ("hwb(90 10% 20% / 0.4)", "hwb(90 10% 20% / 0.4)"),
        ("lab(50 20 -30)", "lab(50 20 -30)"),
        ("oklch(0.7 0.15 250)", "oklch(0.7 0.15 250)"),
        ("color(display-p3 1 0 0)", "color(display-p3 1 0 0)"),
        ("color(xyz 0.25 0.5 0.75)", "color(xyz-d65 0.25 0.5 0.75)"),
    ])
    def test_serialize(self, literal, expected):
        """Test CSS text for each notation."""
        assert serialize_color(parse_color(literal)) == expected

    @pytest.mark.parametrize("literal", [
        "rgb(10% 20% 30% / 0.5)",
        "hsl(10 20% 30%)",
        "oklab(0.5 -0.1 0.2)",
        "color(rec2020 0.5 none 1)",
    ])
    def test_serialized_text_reparses(self, literal):
        """Test serialized output parses back to the same value."""
        color = parse_color(literal)
        assert parse_color(serialize_color(color)) == color

    def test_to_css_matches_serialize(self):
        """Test ColorValue.to_css delegates to serialize_color."""
        color = parse_color("lch(50 30 200)")
        assert color.to_css() == serialize_color(color)
