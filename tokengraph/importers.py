"""
Format importers - DTCG JSON and CSS custom properties to a TokenGraph

- DTCGImporter: DTCG 2025 JSON, every token declares ``$type``
- LegacyDTCGImporter: DTCG 2022 draft, ``$type`` inherited from groups,
  aliases typed after their target, value shorthands accepted
- ResolverImporter: DTCG resolver documents (sets and modifiers)
- CSSVariablesImporter: ``:root { --name: value; }`` with inferred types

Imports are all-or-nothing: every problem found is collected and raised in a
single ImportParseError, and no graph is returned.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from pydantic import ValidationError

from .codec import DTCG_REFERENCES, CSSReferenceSyntax, decode_json, infer_css_value, rebase_aliases
from .config import ImportConfig
from .exceptions import (
    ImportIssue,
    ImportParseError,
    TokenPathError,
    TokenValueError,
    UnsupportedFormatError,
)
from .graph import TokenGraph
from .schema import (
    MODIFIER_EXTENSION,
    GroupNode,
    ResolverDocument,
    ResolverModifier,
    ResolverSet,
    TokenNode,
    describe_errors,
    is_resolver_document,
)
from .tokens import ROOT_TOKEN_NAME, DesignToken, Reference, TokenGroup, TokenType, validate_name

logger = logging.getLogger(__name__)


@dataclass
class _PendingToken:
    """A token whose type may still be unknown until aliases are followed."""

    location: str
    type: Optional[TokenType]
    value: Any  # raw payload, or a Reference for aliases
    meta: Optional[TokenNode] = None


def _infer_alias_types(pending: dict[str, _PendingToken]) -> None:
    """Give untyped aliases the type of their target, following alias chains."""
    progress = True
    while progress:
        progress = False
        for entry in pending.values():
            if entry.type is not None or not isinstance(entry.value, Reference):
                continue
            target = pending.get(entry.value.path)
            if target is not None and target.type is not None:
                entry.type = target.type
                progress = True


class BaseImporter:
    """Base class for format importers."""

    format_name = ""

    def __init__(self, config: Optional[ImportConfig] = None):
        self.config = config or ImportConfig()

    def parse(self, source) -> TokenGraph:
        raise NotImplementedError

    def load(self, path: Union[str, Path]) -> TokenGraph:
        """Import a document from a file."""
        return self.parse(Path(path).read_text(encoding="utf-8"))

    def _build(self, entries: list[tuple[str, Union[TokenGroup, DesignToken]]]) -> TokenGraph:
        graph = TokenGraph()
        for path, node in entries:
            graph.set(path, node)
        token_count = sum(1 for _, node in entries if isinstance(node, DesignToken))
        logger.info(f"Imported {token_count} tokens from {self.format_name} document")
        return graph


# =============================================================================
# DTCG JSON
# =============================================================================

class DTCGImporter(BaseImporter):
    """
    Import DTCG 2025 JSON.

    Example:
        graph = DTCGImporter().parse(Path("tokens.json").read_text())
    """

    format_name = "dtcg"
    strict = True  # 2025 value format
    inherit_types = False  # untyped tokens take $type from their groups

    def parse(self, source: Union[str, bytes, dict]) -> TokenGraph:
        """
        Args:
            source: JSON text or an already decoded mapping

        Raises:
            ImportParseError: If the document is malformed
        """
        return self._import_document(self._load_document(source))

    def _import_document(self, document: dict) -> TokenGraph:
        issues: list[ImportIssue] = []
        entries: list[tuple[str, Union[TokenGroup, _PendingToken]]] = []

        inherited = None
        if self.inherit_types:
            try:
                inherited = GroupNode.model_validate(document).token_type
            except ValidationError as exc:
                issues.extend(ImportIssue("", line) for line in describe_errors(exc))
        self._collect(document, "", inherited, entries, issues)

        pending = {path: node for path, node in entries if isinstance(node, _PendingToken)}
        _infer_alias_types(pending)

        built: list[tuple[str, Union[TokenGroup, DesignToken]]] = []
        for path, node in entries:
            if isinstance(node, TokenGroup):
                built.append((path, node))
                continue
            token = self._decode_token(path, node, issues)
            if token is not None:
                built.append((path, token))

        if issues:
            raise ImportParseError(self.format_name, issues)
        return self._build(built)

    def _load_document(self, source) -> dict:
        if isinstance(source, (str, bytes)):
            try:
                document = json.loads(source)
            except json.JSONDecodeError as exc:
                issue = ImportIssue(f"line {exc.lineno}", f"invalid JSON: {exc.msg} (column {exc.colno})")
                raise ImportParseError(self.format_name, [issue]) from exc
        else:
            document = source
        if not isinstance(document, dict):
            raise ImportParseError(
                self.format_name, [ImportIssue("", "document root must be a JSON object")]
            )
        return document

    def _collect(self, mapping: dict, prefix: str, inherited: Optional[TokenType], entries, issues) -> None:
        for name, raw in mapping.items():
            if name.startswith("$") and name != ROOT_TOKEN_NAME:
                continue
            path = f"{prefix}.{name}" if prefix else name
            try:
                validate_name(name, path)
            except TokenPathError as exc:
                issues.append(ImportIssue(path, exc.reason))
                continue
            if not isinstance(raw, dict):
                issues.append(ImportIssue(path, "expected a token or group object"))
                continue

            if "$value" in raw:
                try:
                    node = TokenNode.model_validate(raw)
                except ValidationError as exc:
                    issues.extend(ImportIssue(path, line) for line in describe_errors(exc))
                    continue
                pending = self._pending(path, node, inherited, issues)
                if pending is not None:
                    entries.append((path, pending))
                continue

            if name == ROOT_TOKEN_NAME:
                issues.append(ImportIssue(path, f"'{ROOT_TOKEN_NAME}' must be a token"))
                continue
            try:
                group = GroupNode.model_validate(raw)
            except ValidationError as exc:
                issues.extend(ImportIssue(path, line) for line in describe_errors(exc))
                continue
            entries.append((path, TokenGroup(
                type=group.token_type,
                description=group.description,
                extensions=group.extensions,
                deprecated=group.deprecated,
            )))
            self._collect(raw, path, group.token_type or inherited, entries, issues)

    def _pending(
        self, path: str, node: TokenNode, inherited: Optional[TokenType], issues
    ) -> Optional[_PendingToken]:
        token_type = node.token_type
        if token_type is None and self.inherit_types:
            token_type = inherited
        value = node.value
        if isinstance(value, str) and DTCG_REFERENCES.matches(value):
            try:
                value = DTCG_REFERENCES.parse(value)
            except TokenPathError as exc:
                issues.append(ImportIssue(path, f"invalid reference {node.value!r}: {exc.reason}"))
                return None
        return _PendingToken(path, token_type, value, node)

    def _decode_token(self, path: str, pending: _PendingToken, issues) -> Optional[DesignToken]:
        if pending.type is None:
            if not self.inherit_types:
                issues.append(ImportIssue(path, "missing $type"))
            elif isinstance(pending.value, Reference):
                issues.append(ImportIssue(
                    path, f"cannot infer type: alias target '{pending.value.path}' is missing or untyped"
                ))
            else:
                issues.append(ImportIssue(path, "missing $type and no group type to inherit"))
            return None

        value = pending.value
        if not isinstance(value, Reference):
            try:
                value = decode_json(pending.type, value, self.strict)
            except TokenValueError as exc:
                issues.append(ImportIssue(path, exc.message))
                return None
        meta = pending.meta
        return DesignToken(
            type=pending.type,
            value=value,
            description=meta.description,
            extensions=meta.extensions,
            deprecated=meta.deprecated,
        )


class LegacyDTCGImporter(DTCGImporter):
    """
    Import DTCG 2022 draft JSON.

    Tokens may omit ``$type`` when an ancestor group declares one, and alias
    tokens without a type take the type of the token they point at.
    """

    format_name = "dtcg-legacy"
    strict = False
    inherit_types = True


# =============================================================================
# DTCG Resolver documents
# =============================================================================

_MISSING = object()


def _deep_merge(target: dict, source: dict) -> dict:
    """
    New mapping with ``source`` laid over ``target``.

    Groups present in both are merged recursively; a token (anything with
    ``$value``) replaces whatever was at its path.
    """
    result = dict(target)
    for key, value in source.items():
        current = result.get(key)
        if (
            isinstance(value, dict)
            and isinstance(current, dict)
            and "$value" not in value
            and "$value" not in current
        ):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


def _merge_sources(sources: list[dict]) -> dict:
    merged: dict = {}
    for source in sources:
        merged = _deep_merge(merged, source)
    return merged


def _pointer_segments(pointer: str) -> list[str]:
    """``#/a/b~1c`` -> ``["a", "b/c"]`` (RFC 6901 unescaping)."""
    body = pointer[1:].lstrip("/")
    if not body:
        return []
    return [segment.replace("~1", "/").replace("~0", "~") for segment in body.split("/")]


def _lookup(document: Any, segments: list[str]) -> Any:
    current = document
    for segment in segments:
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return _MISSING
    return current


def _with_group_types(mapping: dict, base: dict) -> dict:
    """``mapping`` with ``$type`` copied from groups at the same path in ``base`` where it has none."""
    result = {}
    for name, raw in mapping.items():
        other = base.get(name)
        if (
            not name.startswith("$")
            and isinstance(raw, dict)
            and isinstance(other, dict)
            and "$value" not in raw
            and "$value" not in other
        ):
            raw = _with_group_types(raw, other)
            if "$type" not in raw and "$type" in other:
                raw = {"$type": other["$type"], **raw}
        result[name] = raw
    return result


def _token_paths(mapping: dict, prefix: str = "") -> set[str]:
    """Dotted paths of every token in a DTCG mapping."""
    paths = set()
    for name, raw in mapping.items():
        if (name.startswith("$") and name != ROOT_TOKEN_NAME) or not isinstance(raw, dict):
            continue
        path = f"{prefix}.{name}" if prefix else name
        if "$value" in raw:
            paths.add(path)
        else:
            paths |= _token_paths(raw, path)
    return paths


class ResolverImporter(DTCGImporter):
    """
    Import a DTCG resolver document (Resolver Module 2025.10).

    Sets are merged in ``resolutionOrder`` into one token tree; when two
    sources define the same token the later one wins. Each modifier becomes
    a top-level group holding one group per context. An alias inside a
    context points at the context's own token when the context defines that
    path, otherwise at the merged sets.

    ``{"$ref": "#/..."}`` pointers naming a token (or its ``$value``) become
    aliases; pointers into part of a value are replaced by a copy of what
    they point at. Pointers in a set see the sets before it and the set
    itself; pointers in a context see every set and the context.

    Tokens inherit ``$type`` from their groups; values use the 2025 format.

    Example:
        graph = ResolverImporter().parse(Path("design.resolver.json").read_text())
        graph.get("theme.dark.colors.background")
    """

    format_name = "dtcg-resolver"
    strict = True
    inherit_types = True

    def parse(self, source: Union[str, bytes, dict]) -> TokenGraph:
        raw = self._load_document(source)
        try:
            document = ResolverDocument.model_validate(raw)
        except ValidationError as exc:
            issues = [ImportIssue("resolver", line) for line in describe_errors(exc)]
            raise ImportParseError(self.format_name, issues) from exc

        issues: list[ImportIssue] = []
        tokens: dict = {}
        for item in document.resolution_order:
            if isinstance(item, ResolverSet):
                merged = _merge_sources(item.sources)
                visible = _deep_merge(tokens, merged)
                tokens = _deep_merge(tokens, self._dereference(merged, visible, "", issues))
                logger.debug(f"Merged set '{item.name}' from {len(item.sources)} sources")

        combined = dict(tokens)
        for item in document.resolution_order:
            if isinstance(item, ResolverModifier):
                if item.name in tokens:
                    issues.append(ImportIssue(
                        item.name, f"modifier '{item.name}' has the same name as a token or group"
                    ))
                    continue
                combined[item.name] = self._modifier_group(item, tokens, issues)

        if issues:
            raise ImportParseError(self.format_name, issues)
        return self._import_document(combined)

    def _modifier_group(self, modifier: ResolverModifier, tokens: dict, issues: list[ImportIssue]) -> dict:
        extensions = dict(modifier.extensions or {})
        extensions[MODIFIER_EXTENSION] = {"default": modifier.default} if modifier.default else {}
        group: dict = {"$extensions": extensions}
        if modifier.description is not None:
            group["$description"] = modifier.description

        for context, sources in modifier.contexts.items():
            prefix = f"{modifier.name}.{context}"
            merged = _merge_sources(sources)
            resolved = self._dereference(merged, _deep_merge(tokens, merged), prefix, issues)
            resolved = _with_group_types(resolved, tokens)
            local = _token_paths(resolved)
            group[context] = rebase_aliases(
                resolved,
                lambda ref: Reference(f"{prefix}.{ref.path}") if ref.path in local else ref,
            )
            logger.debug(f"Loaded context '{prefix}' with {len(local)} tokens")
        return group

    def _dereference(
        self, node: Any, document: dict, location: str, issues: list[ImportIssue], active=(), in_value=False
    ) -> Any:
        """Copy of ``node`` with every ``{"$ref": ...}`` object replaced."""
        if isinstance(node, list):
            return [
                self._dereference(item, document, f"{location}[{index}]", issues, active, in_value)
                for index, item in enumerate(node)
            ]
        if not isinstance(node, dict):
            return node
        pointer = node.get("$ref")
        if isinstance(pointer, str):
            return self._follow_pointer(pointer, document, location, issues, active, in_value)
        return {
            key: self._dereference(
                value,
                document,
                f"{location}.{key}" if location else key,
                issues,
                active,
                in_value or key == "$value",
            )
            for key, value in node.items()
        }

    def _follow_pointer(self, pointer: str, document: dict, location: str, issues, active, in_value) -> Any:
        if not pointer.startswith("#"):
            issues.append(ImportIssue(location, f"external $ref '{pointer}' is not supported"))
            return None
        if pointer in active:
            issues.append(ImportIssue(location, f"circular $ref '{pointer}'"))
            return None

        segments = _pointer_segments(pointer)
        split = next(
            (i for i, s in enumerate(segments) if s.startswith("$") and s != ROOT_TOKEN_NAME),
            len(segments),
        )
        token_segments, rest = segments[:split], segments[split:]
        if rest in ([], ["$value"]):
            target = _lookup(document, token_segments)
            if not (isinstance(target, dict) and "$value" in target):
                issues.append(ImportIssue(location, f"$ref '{pointer}' does not point at a token"))
                return None
            try:
                for segment in token_segments:
                    validate_name(segment, pointer)
            except TokenPathError as exc:
                issues.append(ImportIssue(location, f"$ref '{pointer}': {exc.reason}"))
                return None
            alias = Reference(".".join(token_segments)).to_dtcg()
            if in_value:
                return alias
            # In place of a token: an alias token of the same type
            token = {"$value": alias}
            if "$type" in target:
                token = {"$type": target["$type"], **token}
            return token

        target = _lookup(document, segments)
        if target is _MISSING:
            issues.append(ImportIssue(location, f"$ref '{pointer}' points at nothing"))
            return None
        return self._dereference(target, document, location, issues, active + (pointer,), True)


# =============================================================================
# CSS Custom Properties
# =============================================================================

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


def _line_at(text: str, index: int) -> int:
    return text.count("\n", 0, index) + 1


class CSSVariablesImporter(BaseImporter):
    """
    Import custom properties declared in ``:root`` blocks.

    Each ``--name: value`` becomes a top-level token named ``name`` whose type
    is inferred from the value; ``var(--other)`` becomes an alias typed after
    ``other``. Other selectors and regular properties are ignored. When the
    same variable is declared twice the last declaration wins.
    """

    format_name = "css"

    def __init__(self, config: Optional[ImportConfig] = None):
        super().__init__(config)
        self.references = CSSReferenceSyntax()

    def parse(self, source: str) -> TokenGraph:
        # Blank out comments but keep their newlines so line numbers stay right
        text = _COMMENT_RE.sub(lambda m: "\n" * m.group(0).count("\n"), source)
        issues: list[ImportIssue] = []

        declarations: dict[str, tuple[int, str]] = {}
        for selector, body, offset in self._blocks(text, issues):
            if " ".join(selector.split()) != ":root":
                logger.debug(f"Skipping CSS block '{selector.strip()}'")
                continue
            for line, prop, value in self._declarations(text, body, offset, issues):
                if not prop.startswith("--"):
                    logger.debug(f"Skipping non-custom property '{prop}' on line {line}")
                    continue
                declarations[prop[2:]] = (line, value)

        pending: dict[str, _PendingToken] = {}
        for name, (line, value) in declarations.items():
            location = f"line {line}"
            try:
                validate_name(name)
            except TokenPathError as exc:
                issues.append(ImportIssue(location, exc.reason))
                continue
            reference = self.references.parse(value)
            if reference is not None:
                pending[name] = _PendingToken(location, None, reference)
                continue
            try:
                inferred = infer_css_value(value)
            except TokenValueError as exc:
                issues.append(ImportIssue(location, f"--{name}: {exc.message}"))
                continue
            if inferred is None:
                self._unknown(location, f"cannot infer token type of --{name}: {value}", issues)
                continue
            pending[name] = _PendingToken(location, inferred[0], inferred[1])

        _infer_alias_types(pending)
        entries: list[tuple[str, DesignToken]] = []
        for name, entry in pending.items():
            if entry.type is None:
                self._unknown(entry.location, self._untyped_alias(name, pending), issues)
                continue
            entries.append((name, DesignToken(type=entry.type, value=entry.value)))

        if issues:
            raise ImportParseError(self.format_name, issues)
        return self._build(entries)

    @staticmethod
    def _untyped_alias(name: str, pending: dict[str, _PendingToken]) -> str:
        """Why an alias chain starting at ``name`` never reached a typed value."""
        chain = [name]
        current = pending[name].value.path
        # Every hop of an untyped chain is itself an untyped alias
        while current in pending:
            if current in chain:
                route = " -> ".join(f"--{n}" for n in chain + [current])
                return f"cyclic alias {route}"
            chain.append(current)
            current = pending[current].value.path
        return f"--{name} references undefined variable --{current}"

    def _unknown(self, location: str, message: str, issues: list[ImportIssue]) -> None:
        if self.config.skip_unknown:
            logger.warning(f"Skipping declaration on {location}: {message}")
        else:
            issues.append(ImportIssue(location, message))

    def _blocks(self, text: str, issues: list[ImportIssue]) -> Iterator[tuple[str, str, int]]:
        """Top-level ``selector { body }`` blocks with the body's start offset."""
        depth = 0
        selector_start = 0
        body_start = 0
        selector = ""
        for index, char in enumerate(text):
            if char == "{":
                if depth == 0:
                    selector = text[selector_start:index]
                    body_start = index + 1
                depth += 1
            elif char == "}":
                if depth == 0:
                    issues.append(ImportIssue(f"line {_line_at(text, index)}", "unexpected '}'"))
                    selector_start = index + 1
                    continue
                depth -= 1
                if depth == 0:
                    yield selector, text[body_start:index], body_start
                    selector_start = index + 1
        if depth > 0:
            issues.append(ImportIssue(f"line {_line_at(text, body_start)}", "unclosed block"))

    def _declarations(
        self, text: str, body: str, offset: int, issues: list[ImportIssue]
    ) -> Iterator[tuple[int, str, str]]:
        """``(line, property, value)`` for each declaration, splitting on ';' outside parentheses."""
        depth = 0
        quote = ""
        start = 0
        for index, char in enumerate(body + ";"):
            if quote:
                if char == quote:
                    quote = ""
            elif char in "\"'":
                quote = char
            elif char == "(":
                depth += 1
            elif char == ")":
                depth = max(0, depth - 1)
            elif char == ";" and depth == 0:
                chunk = body[start:index]
                stripped = chunk.strip()
                if stripped:
                    line = _line_at(text, offset + start + len(chunk) - len(chunk.lstrip()))
                    prop, colon, value = stripped.partition(":")
                    if not colon or not prop.strip() or not value.strip():
                        issues.append(ImportIssue(f"line {line}", f"malformed declaration '{stripped}'"))
                    else:
                        yield line, prop.strip(), value.strip()
                start = index + 1


# =============================================================================
# Registry and convenience functions
# =============================================================================

IMPORTERS = {
    DTCGImporter.format_name: DTCGImporter,
    LegacyDTCGImporter.format_name: LegacyDTCGImporter,
    ResolverImporter.format_name: ResolverImporter,
    CSSVariablesImporter.format_name: CSSVariablesImporter,
}


def get_importer(format_name: str, config: Optional[ImportConfig] = None) -> BaseImporter:
    """Importer instance for a format name ("dtcg", "dtcg-legacy", "dtcg-resolver", "css")."""
    importer_class = IMPORTERS.get(format_name)
    if importer_class is None:
        raise UnsupportedFormatError(format_name, sorted(IMPORTERS))
    return importer_class(config)


def import_dtcg(source: Union[str, bytes, dict]) -> TokenGraph:
    return DTCGImporter().parse(source)


def import_dtcg_legacy(source: Union[str, bytes, dict]) -> TokenGraph:
    return LegacyDTCGImporter().parse(source)


def import_resolver(source: Union[str, bytes, dict]) -> TokenGraph:
    return ResolverImporter().parse(source)


def import_css_variables(source: str, config: Optional[ImportConfig] = None) -> TokenGraph:
    return CSSVariablesImporter(config).parse(source)


def load_tokens(
    path: Union[str, Path],
    format_name: Optional[str] = None,
    config: Optional[ImportConfig] = None,
) -> TokenGraph:
    """
    Import a token file, picking the format from its contents when not given.

    ``.css`` files use the CSS importer. Other files are read as JSON: a
    document with ``version`` "2025.10" and a ``resolutionOrder`` list is a
    resolver document, anything else is DTCG 2025.
    """
    path = Path(path)
    if format_name is not None:
        return get_importer(format_name, config).load(path)
    if path.suffix.lower() == ".css":
        return CSSVariablesImporter(config).load(path)

    importer = DTCGImporter(config)
    document = importer._load_document(path.read_text(encoding="utf-8"))
    if is_resolver_document(document):
        importer = ResolverImporter(config)
    return importer.parse(document)
