"""
Tests for format exporters (exporters.py).

Tests:
- DTCG JSON output and round-trips
- CSS custom properties and SCSS variables
- DTCG resolver documents
- Reference validation during export
- Registry and file output
"""

import json
import logging

import pytest

from tokengraph.config import ExportConfig
from tokengraph.exceptions import UnsupportedFormatError
from tokengraph.exporters import (
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
from tokengraph.graph import TokenGraph
from tokengraph.importers import import_css_variables, import_dtcg, import_resolver
from tokengraph.schema import MODIFIER_EXTENSION
from tokengraph.tokens import (
    DesignToken,
    DimensionValue,
    GradientStop,
    Reference,
    TokenGroup,
    TokenType,
    TransitionValue,
)


# =============================================================================
# JSON Tests
# =============================================================================

class TestJSONExporter:
    """Tests for DTCG JSON export."""

    def test_tokens_carry_type_and_value(self, simple_css_graph):
        """Test every token has $type and $value; aliases stay aliases."""
        document = JSONExporter(simple_css_graph).to_dict()
        assert document["colors"]["accent"] == {"$type": "color", "$value": "{colors.primary}"}
        assert document["colors"]["primary"]["$value"]["hex"] == "#3366ff"

    def test_group_metadata(self, palette_graph):
        """Test group $type is written before children."""
        document = JSONExporter(palette_graph).to_dict()
        assert list(document["colors"]) == ["$type", "blue", "primary"]
        assert list(document) == ["colors", "button", "shadows", "borders", "typography"]

    def test_token_metadata(self):
        """Test description, extensions and deprecation."""
        graph = TokenGraph()
        graph.set("n", DesignToken.number(
            2, description="Scale", extensions={"x": 1}, deprecated=True
        ))
        assert JSONExporter(graph).to_dict()["n"] == {
            "$type": "number",
            "$value": 2,
            "$description": "Scale",
            "$extensions": {"x": 1},
            "$deprecated": True,
        }

    def test_indent(self, simple_css_graph):
        """Test json_indent controls formatting."""
        compact = export_json(simple_css_graph, ExportConfig(json_indent=None))
        assert "\n" not in compact

    def test_round_trip(self, dtcg_text):
        """Test export then import gives an equal graph."""
        graph = import_dtcg(dtcg_text)
        assert import_dtcg(export_json(graph)) == graph

    def test_round_trip_built_graph(self, palette_graph):
        """Test graphs built in code survive a JSON round-trip."""
        assert import_dtcg(export_json(palette_graph)) == palette_graph

    def test_non_ascii(self):
        """Test descriptions are written without escaping."""
        graph = TokenGraph()
        graph.set("n", DesignToken.number(1, description="Größe"))
        assert "Größe" in export_json(graph)


# =============================================================================
# CSS and SCSS Tests
# =============================================================================

class TestCSSExporter:
    """Tests for CSS custom property export."""

    def test_references_preserved(self, simple_css_graph):
        """Test aliases export as var()."""
        assert export_css(simple_css_graph) == (
            ":root {\n"
            "  --colors-primary: #3366ff;\n"
            "  --colors-accent: var(--colors-primary);\n"
            "}"
        )

    def test_empty_graph(self):
        """Test an empty graph renders an empty block."""
        assert export_css(TokenGraph()) == ":root {\n}"

    def test_selector_prefix_indent(self, simple_css_graph):
        """Test block and naming options."""
        config = ExportConfig(selector="[data-theme]", prefix="ds", indent="\t")
        lines = export_css(simple_css_graph, config).splitlines()
        assert lines[0] == "[data-theme] {"
        assert lines[2] == "\t--ds-colors-accent: var(--ds-colors-primary);"

    def test_composite_expansion(self, palette_graph):
        """Test composites emit sub-properties before the shorthand."""
        css = export_css(palette_graph)
        assert "  --borders-focus-color: var(--colors-primary);\n" in css
        assert "  --borders-focus-width: 2px;\n" in css
        assert "  --borders-focus: 2px dashed var(--colors-primary);\n" in css
        assert "  --shadows-card: 0px 4px 8px 0px var(--colors-blue);\n" in css
        assert "  --typography-body-font-family: Inter, sans-serif;\n" in css

    def test_no_expansion(self, palette_graph):
        """Test expand_composites=False emits one declaration per token."""
        declarations = CSSExporter(palette_graph, ExportConfig(expand_composites=False)).declarations()
        assert len(declarations) == 6

    def test_camel_case_names(self):
        """Test camelCase names become kebab-case."""
        graph = TokenGraph()
        graph.set("motion.fastIn", DesignToken.transition(TransitionValue()))
        names = [name for name, _ in CSSExporter(graph).declarations()]
        assert names[-1] == "--motion-fast-in"
        assert "--motion-fast-in-timing-function" in names

    def test_css_round_trip(self, simple_css_graph):
        """Test CSS output imports back with the same flat names."""
        graph = import_css_variables(export_css(simple_css_graph))
        assert graph.get("colors-accent").value == Reference("colors-primary")
        assert graph.get("colors-primary").value.hex == "#3366ff"

    def test_name_collision_warning(self, caplog):
        """Test tokens mapping to the same variable are reported."""
        graph = TokenGraph()
        graph.set("a.b", DesignToken.number(1))
        graph.set("a-b", DesignToken.number(2))
        with caplog.at_level(logging.WARNING, logger="tokengraph.exporters"):
            export_css(graph)
        assert "both export as --a-b" in caplog.text


class TestSCSSExporter:
    """Tests for SCSS variable export."""

    def test_references_preserved(self, simple_css_graph):
        """Test aliases export as $variables."""
        assert export_scss(simple_css_graph) == (
            "$colors-primary: #3366ff;\n"
            "$colors-accent: $colors-primary;"
        )

    def test_separator(self, simple_css_graph):
        """Test a custom path separator."""
        scss = export_scss(simple_css_graph, ExportConfig(path_separator="__"))
        assert scss.splitlines()[1] == "$colors__accent: $colors__primary;"

    def test_empty_graph(self):
        """Test an empty graph renders nothing."""
        assert export_scss(TokenGraph()) == ""


class TestResolverExporter:
    """Tests for resolver document export."""

    @pytest.fixture
    def themed_graph(self) -> TokenGraph:
        white = {"colorSpace": "srgb", "components": [1, 1, 1], "hex": "#ffffff"}
        black = {"colorSpace": "srgb", "components": [0, 0, 0], "hex": "#000000"}
        return import_resolver({
            "version": "2025.10",
            "resolutionOrder": [
                {"type": "set", "name": "palette", "sources": [
                    {"colors": {"$type": "color", "white": {"$value": white}, "black": {"$value": black}}},
                ]},
                {"type": "set", "name": "semantic", "sources": [
                    {"brand": {"$type": "color", "$value": {"$ref": "#/colors/black/$value"}}},
                ]},
                {
                    "type": "modifier",
                    "name": "theme",
                    "description": "Color schemes",
                    "default": "light",
                    "$extensions": {"com.example": {"figma": "Mode"}},
                    "contexts": {
                        "light": [{"colors": {"background": {"$value": "{colors.white}"}}}],
                        "dark": [{"colors": {
                            "background": {"$value": "{brand}"},
                            "surface": {"$value": "{colors.background}"},
                        }}],
                    },
                },
            ],
        })

    def test_single_set(self, simple_css_graph):
        """Test a graph without modifiers is written as one set."""
        document = json.loads(export_resolver(simple_css_graph))
        assert document == {
            "version": "2025.10",
            "resolutionOrder": [
                {"type": "set", "name": "tokens", "sources": [JSONExporter(simple_css_graph).to_dict()]},
            ],
        }

    def test_set_name(self, simple_css_graph):
        """Test resolver_set_name names the set."""
        document = ResolverExporter(simple_css_graph, ExportConfig(resolver_set_name="base")).to_dict()
        assert document["resolutionOrder"][0]["name"] == "base"

    def test_empty_graph(self):
        """Test an empty graph has an empty resolution order."""
        assert ResolverExporter(TokenGraph()).to_dict() == {"version": "2025.10", "resolutionOrder": []}

    def test_modifier_entry(self, themed_graph):
        """Test marked groups become modifiers after the set."""
        order = ResolverExporter(themed_graph).to_dict()["resolutionOrder"]
        assert [(item["type"], item["name"]) for item in order] == [("set", "tokens"), ("modifier", "theme")]
        assert list(order[0]["sources"][0]) == ["colors", "brand"]

        modifier = order[1]
        assert modifier["description"] == "Color schemes"
        assert modifier["default"] == "light"
        assert modifier["$extensions"] == {"com.example": {"figma": "Mode"}}
        assert list(modifier["contexts"]) == ["light", "dark"]

    def test_context_aliases_relative(self, themed_graph):
        """Test aliases to a context's own tokens drop the context prefix."""
        modifier = ResolverExporter(themed_graph).to_dict()["resolutionOrder"][1]
        dark = modifier["contexts"]["dark"][0]["colors"]
        assert dark["surface"] == {"$type": "color", "$value": "{colors.background}"}
        assert dark["background"] == {"$type": "color", "$value": "{brand}"}

    def test_round_trip(self, themed_graph):
        """Test export then import gives an equal graph."""
        assert import_resolver(export_resolver(themed_graph)) == themed_graph

    def test_round_trip_built_graph(self):
        """Test modifiers built in code survive a round-trip."""
        graph = TokenGraph()
        graph.set("size", DesignToken.dimension(8))
        graph.set("density", TokenGroup(extensions={MODIFIER_EXTENSION: {"default": "compact"}}))
        graph.set("density.compact.gap", DesignToken.dimension(4))
        graph.set("density.compact.inset", DesignToken.reference("density.compact.gap", TokenType.DIMENSION))
        graph.set("density.compact.outset", DesignToken.reference("size", TokenType.DIMENSION))

        document = ResolverExporter(graph).to_dict()
        compact = document["resolutionOrder"][1]["contexts"]["compact"][0]
        assert compact["inset"]["$value"] == "{gap}"
        assert compact["outset"]["$value"] == "{size}"
        assert import_resolver(document) == graph

    def test_shadowed_alias_warning(self, caplog):
        """Test a context alias to a base path the context also defines is reported."""
        graph = TokenGraph()
        graph.set("gap", DesignToken.dimension(8))
        graph.set("density", TokenGroup(extensions={MODIFIER_EXTENSION: {}}))
        graph.set("density.compact.gap", DesignToken.dimension(4))
        graph.set("density.compact.inset", DesignToken.reference("gap", TokenType.DIMENSION))
        with caplog.at_level(logging.WARNING, logger="tokengraph.exporters"):
            export_resolver(graph)
        assert "Context 'density.compact' aliases 'gap'" in caplog.text


# =============================================================================
# Validation Tests
# =============================================================================

class TestExportValidation:
    """Tests for reference checks during export."""

    @pytest.fixture
    def broken_graph(self, palette_graph):
        palette_graph.set("colors.danger", DesignToken.gradient([
            GradientStop(Reference("colors.red"), 0),
            GradientStop(Reference("colors.crimson"), 1),
        ]))
        return palette_graph

    def test_errors_collected(self, broken_graph):
        """Test broken references are listed on the exporter."""
        exporter = CSSExporter(broken_graph)
        output = exporter.export()
        assert len(exporter.errors) == 2
        assert "--colors-danger: linear-gradient(90deg, var(--colors-red) 0%, var(--colors-crimson) 100%);" in output

    def test_warning_per_token(self, broken_graph, caplog):
        """Test one warning summarises each broken token."""
        with caplog.at_level(logging.WARNING, logger="tokengraph.exporters"):
            export_json(broken_graph)
        assert "token `colors.danger` has 2 unresolved references" in caplog.text

    def test_long_alias_chain(self):
        """Test exporting a chain of thousands of aliases."""
        graph = TokenGraph()
        graph.set("t0", DesignToken.number(1))
        for index in range(1, 2000):
            graph.set(f"t{index}", DesignToken.reference(f"t{index - 1}", TokenType.NUMBER))
        exporter = CSSExporter(graph)
        lines = exporter.export().splitlines()
        assert exporter.errors == []
        assert lines[-2] == "  --t1999: var(--t1998);"
        assert len(lines) == 2002

    def test_validation_disabled(self, broken_graph, caplog):
        """Test validate_references=False skips resolution."""
        exporter = SCSSExporter(broken_graph, ExportConfig(validate_references=False))
        with caplog.at_level(logging.WARNING, logger="tokengraph.exporters"):
            exporter.export()
        assert exporter.errors == []
        assert "unresolved" not in caplog.text


# =============================================================================
# Registry Tests
# =============================================================================

class TestRegistry:
    """Tests for get_exporter and save."""

    @pytest.mark.parametrize("name,cls", [
        ("json", JSONExporter),
        ("dtcg-resolver", ResolverExporter),
        ("css", CSSExporter),
        ("scss", SCSSExporter),
    ])
    def test_get_exporter(self, simple_css_graph, name, cls):
        """Test format names map to exporter classes."""
        assert isinstance(get_exporter(name, simple_css_graph), cls)

    def test_unknown_format(self, simple_css_graph):
        """Test unknown formats list the supported ones."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            get_exporter("less", simple_css_graph)
        assert exc_info.value.supported == ["css", "dtcg-resolver", "json", "scss"]

    def test_save_creates_directories(self, tmp_path, simple_css_graph):
        """Test save writes the file and its parent folders."""
        path = JSONExporter(simple_css_graph).save(tmp_path / "build" / "tokens.json")
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8"))["colors"]["accent"]["$value"] == "{colors.primary}"

    def test_invalid_separator(self):
        """Test separators clashing with reference syntax are rejected."""
        with pytest.raises(ValueError):
            ExportConfig(path_separator=".")
        with pytest.raises(ValueError):
            ExportConfig(path_separator="")

    def test_dimension_value_unchanged(self):
        """Test exporting does not modify token values."""
        graph = TokenGraph()
        graph.set("gap", DesignToken.dimension(4))
        export_css(graph)
        assert graph.get("gap").value == DimensionValue(4)
        assert graph.get("gap").type == TokenType.DIMENSION
