"""
Format exporters - TokenGraph to DTCG JSON, resolver documents, CSS custom
properties and SCSS

References are never flattened: each format writes them in its own syntax
(``{path}``, ``var(--name)``, ``$name``). Before rendering, every exporter
re-resolves the graph and reports broken references on ``exporter.errors``
and in the log; output is produced regardless.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .codec import (
    CSSReferenceSyntax,
    ReferenceSyntax,
    SCSSReferenceSyntax,
    css_declarations,
    encode_json,
    rebase_aliases,
)
from .config import ExportConfig
from .exceptions import UnsupportedFormatError
from .graph import ResolutionError, TokenGraph
from .schema import MODIFIER_EXTENSION, RESOLVER_VERSION
from .tokens import DesignToken, Reference, TokenGroup

logger = logging.getLogger(__name__)


class BaseExporter:
    """
    Base class for exporters.

    Subclasses implement ``render``; ``export`` validates references first.
    """

    format_name = ""

    def __init__(self, graph: TokenGraph, config: Optional[ExportConfig] = None):
        self.graph = graph
        self.config = config or ExportConfig()
        self.errors: list[ResolutionError] = []

    def validate(self) -> list[ResolutionError]:
        """Resolve the whole graph and log broken references per token."""
        if not self.config.validate_references:
            self.errors = []
            return self.errors

        self.errors = self.graph.validate()
        per_token: dict[str, int] = {}
        for error in self.errors:
            per_token[error.path] = per_token.get(error.path, 0) + 1
        for path, count in per_token.items():
            noun = "reference" if count == 1 else "references"
            logger.warning(f"token `{path}` has {count} unresolved {noun}")
        return self.errors

    def render(self) -> str:
        raise NotImplementedError

    def export(self) -> str:
        """Validate references, then render the whole graph."""
        self.validate()
        output = self.render()
        token_count = sum(1 for _ in self.graph.tokens())
        logger.info(f"Exported {token_count} tokens as {self.format_name}")
        return output

    def save(self, path: Union[str, Path]) -> Path:
        """Export to a file, creating parent directories as needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export(), encoding="utf-8")
        return path


def _metadata(node: Union[DesignToken, TokenGroup]) -> dict:
    result = {}
    if isinstance(node, TokenGroup) and node.type is not None:
        result["$type"] = node.type.value
    if node.description is not None:
        result["$description"] = node.description
    if node.extensions is not None:
        result["$extensions"] = node.extensions
    if node.deprecated is not None:
        result["$deprecated"] = node.deprecated
    return result


class JSONExporter(BaseExporter):
    """
    Export to DTCG 2025 JSON.

    Every token carries ``$type`` and ``$value``; group metadata is kept.
    """

    format_name = "json"

    def to_dict(self) -> dict:
        document: dict = {}
        containers = {"": document}
        for path, node in self.graph.walk():
            parent, _, name = path.rpartition(".")
            if isinstance(node, TokenGroup):
                entry = _metadata(node)
                containers[path] = entry
            else:
                entry = {
                    "$type": node.type.value,
                    "$value": encode_json(node.type, node.value),
                    **_metadata(node),
                }
            containers[parent][name] = entry
        return document

    def render(self) -> str:
        return json.dumps(self.to_dict(), indent=self.config.json_indent, ensure_ascii=False)


class ResolverExporter(JSONExporter):
    """
    Export a DTCG resolver document (Resolver Module 2025.10).

    Top-level groups marked as modifiers become modifier entries with one
    context per child group; every other top-level node goes into a single
    set named by ``config.resolver_set_name``. Aliases from a context to its
    own tokens are written relative to the context, which is how the
    resolver importer reads them back.
    """

    format_name = "dtcg-resolver"

    def to_dict(self) -> dict:
        tokens: dict = {}
        modifiers = []
        for name, entry in super().to_dict().items():
            marker = (entry.get("$extensions") or {}).get(MODIFIER_EXTENSION)
            if marker is None:
                tokens[name] = entry
            else:
                modifiers.append(self._modifier(name, entry, marker))

        order: list = []
        if tokens:
            order.append({"type": "set", "name": self.config.resolver_set_name, "sources": [tokens]})
        order.extend(modifiers)
        return {"version": RESOLVER_VERSION, "resolutionOrder": order}

    def _modifier(self, name: str, entry: dict, marker: dict) -> dict:
        item: dict = {"type": "modifier", "name": name}
        if "$description" in entry:
            item["description"] = entry["$description"]

        contexts = {}
        for context, child in entry.items():
            if context.startswith("$"):
                continue
            prefix = f"{name}.{context}."
            local = {
                path[len(prefix):]
                for path, _ in self.graph.tokens()
                if path.startswith(prefix)
            }

            def relative(ref: Reference) -> Reference:
                if ref.path.startswith(prefix):
                    return Reference(ref.path[len(prefix):])
                if ref.path in local:
                    logger.warning(
                        f"Context '{prefix[:-1]}' aliases '{ref.path}' but defines the same path; "
                        f"the alias will point at the context's own token when imported"
                    )
                return ref

            contexts[context] = [rebase_aliases(child, relative)]
        item["contexts"] = contexts

        if marker.get("default") is not None:
            item["default"] = marker["default"]
        extensions = {k: v for k, v in entry["$extensions"].items() if k != MODIFIER_EXTENSION}
        if extensions:
            item["$extensions"] = extensions
        return item


class _VariableExporter(BaseExporter):
    """Shared rendering for formats with one variable per token."""

    sigil = ""

    def reference_syntax(self) -> ReferenceSyntax:
        raise NotImplementedError

    def declarations(self) -> list[tuple[str, str]]:
        """``(variable, value)`` pairs in graph order."""
        references = self.reference_syntax()
        result = []
        seen: dict[str, str] = {}
        for path, token in self.graph.tokens():
            name = self.sigil + references.variable_name(path)
            if name in seen:
                logger.warning(f"Tokens '{seen[name]}' and '{path}' both export as {name}")
            seen[name] = path
            result.extend(css_declarations(
                name, token.type, token.value, references, self.config.expand_composites
            ))
        return result


class CSSExporter(_VariableExporter):
    """
    Export CSS custom properties in a single block.

    Example output:
        :root {
          --colors-primary: #3366ff;
          --colors-accent: var(--colors-primary);
        }
    """

    format_name = "css"
    sigil = "--"

    def reference_syntax(self) -> ReferenceSyntax:
        return CSSReferenceSyntax(self.config.prefix, self.config.path_separator)

    def render(self) -> str:
        lines = [f"{self.config.selector} {{"]
        for name, value in self.declarations():
            lines.append(f"{self.config.indent}{name}: {value};")
        lines.append("}")
        return "\n".join(lines)


class SCSSExporter(_VariableExporter):
    """Export SCSS variables, one ``$name: value;`` line per declaration."""

    format_name = "scss"
    sigil = "$"

    def reference_syntax(self) -> ReferenceSyntax:
        return SCSSReferenceSyntax(self.config.prefix, self.config.path_separator)

    def render(self) -> str:
        return "\n".join(f"{name}: {value};" for name, value in self.declarations())


# =============================================================================
# Registry and convenience functions
# =============================================================================

EXPORTERS = {
    JSONExporter.format_name: JSONExporter,
    ResolverExporter.format_name: ResolverExporter,
    CSSExporter.format_name: CSSExporter,
    SCSSExporter.format_name: SCSSExporter,
}


def get_exporter(format_name: str, graph: TokenGraph, config: Optional[ExportConfig] = None) -> BaseExporter:
    """Exporter instance for a format name ("json", "dtcg-resolver", "css", "scss")."""
    exporter_class = EXPORTERS.get(format_name)
    if exporter_class is None:
        raise UnsupportedFormatError(format_name, sorted(EXPORTERS))
    return exporter_class(graph, config)


def export_json(graph: TokenGraph, config: Optional[ExportConfig] = None) -> str:
    return JSONExporter(graph, config).export()


def export_resolver(graph: TokenGraph, config: Optional[ExportConfig] = None) -> str:
    return ResolverExporter(graph, config).export()


def export_css(graph: TokenGraph, config: Optional[ExportConfig] = None) -> str:
    return CSSExporter(graph, config).export()


def export_scss(graph: TokenGraph, config: Optional[ExportConfig] = None) -> str:
    return SCSSExporter(graph, config).export()
