"""
Token conversion example - build a palette, refactor it and export it.

Run with: python examples/convert_tokens.py
"""

import logging

from tokengraph import (
    BorderValue,
    DesignToken,
    DimensionValue,
    ExportConfig,
    ResolutionError,
    Reference,
    ShadowValue,
    TokenGraph,
    TokenGroup,
    TokenType,
    export_css,
    export_json,
    export_scss,
    import_dtcg,
)


def build_palette() -> TokenGraph:
    """A small theme: base colors, semantic aliases and two composites."""
    graph = TokenGraph()
    graph.set("base", TokenGroup(type=TokenType.COLOR, description="Raw palette"))
    graph.set("base.blue", DesignToken.color("oklch(0.62 0.19 255)"))
    graph.set("base.slate", DesignToken.color("#334155"))
    graph.set("semantic.accent", DesignToken.reference("base.blue", TokenType.COLOR))
    graph.set("semantic.text", DesignToken.reference("base.slate", TokenType.COLOR))
    graph.set("space.sm", DesignToken.dimension(4))
    graph.set("card.border", DesignToken.border(BorderValue(
        color=Reference("semantic.text"),
        width=DimensionValue(1),
    )))
    graph.set("card.shadow", DesignToken.shadow(ShadowValue(
        color=Reference("base.slate"),
        offset_y=Reference("space.sm"),
        blur=DimensionValue(12),
    )))
    return graph


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    graph = build_palette()

    print("=" * 60)
    print("Resolving")
    for path in ("semantic.accent", "card.border"):
        result = graph.resolve(path)
        if isinstance(result, ResolutionError):
            print(f"  {path}: {result.message}")
        else:
            print(f"  {path}: {result.value}")

    print("=" * 60)
    print("Renaming base -> palette")
    rewritten = graph.move("base", "palette")
    print(f"  rewrote {rewritten} references")

    print("=" * 60)
    print("CSS")
    print(export_css(graph, ExportConfig(prefix="ds")))

    print("=" * 60)
    print("SCSS")
    print(export_scss(graph))

    print("=" * 60)
    print("Breaking a reference")
    graph.delete("palette.slate")
    for error in graph.validate():
        print(f"  {error.message}")

    print("=" * 60)
    print("DTCG round-trip")
    document = export_json(graph)
    print(f"  equal after re-import: {import_dtcg(document) == graph}")


if __name__ == "__main__":
    main()
