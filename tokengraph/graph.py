"""
Token Graph - ordered token tree with alias resolution

Nodes live in one flat store keyed by full dotted path; each group keeps an
ordered list of its child names. References are path strings looked up at
read time, so the graph never holds live pointers between tokens and
resolution always reflects the current contents.

Resolution reports problems as ``ResolutionError`` values instead of raising:
- missing: the referenced path does not exist (or is a group)
- cyclic: the reference re-enters a token already being resolved
- type-mismatch: the target's type differs from the type expected there

Example:
    graph = TokenGraph()
    graph.set("colors.blue", DesignToken.color("#0000ff"))
    graph.set("colors.primary", DesignToken.reference("colors.blue", TokenType.COLOR))
    graph.resolve("colors.primary").value   # ColorValue for #0000ff
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator, Optional, Union

from .exceptions import GraphStructureError, TokenExistsError, TokenNotFoundError
from .tokens import (
    DesignToken,
    Node,
    Reference,
    TokenGroup,
    TokenType,
    find_references,
    map_references,
    split_path,
)

logger = logging.getLogger(__name__)

ROOT = ""


class ResolutionKind(str, Enum):
    MISSING = "missing"
    CYCLIC = "cyclic"
    TYPE_MISMATCH = "type-mismatch"


@dataclass(frozen=True)
class ResolutionError:
    """A reference that could not be resolved."""

    path: str  # token whose resolution failed
    reference: str  # path of the reference that broke
    kind: ResolutionKind
    field: str = ""  # location inside a composite value, "" for the whole value
    chain: tuple[str, ...] = ()  # paths visited, ending at ``reference``

    @property
    def message(self) -> str:
        where = f" at '{self.field}'" if self.field else ""
        if self.kind == ResolutionKind.CYCLIC:
            return f"Token '{self.path}'{where} has a circular reference: {' -> '.join(self.chain)}"
        if self.kind == ResolutionKind.TYPE_MISMATCH:
            return f"Token '{self.path}'{where} references '{self.reference}' of an incompatible type"
        return f"Token '{self.path}'{where} references missing token '{self.reference}'"


@dataclass
class ResolvedValue:
    """
    Fully resolved value of a token.

    Composite parts that failed to resolve are ``None`` in ``value`` and
    listed in ``errors``.
    """

    path: str
    type: TokenType
    value: Any
    errors: list[ResolutionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _join_field(outer: str, inner: str) -> str:
    if not inner:
        return outer
    if not outer:
        return inner
    return outer + inner if inner.startswith("[") else f"{outer}.{inner}"


class TokenGraph:
    """
    Ordered tree of tokens and groups addressed by dotted paths.
    """

    def __init__(self):
        self._nodes: dict[str, Node] = {}
        self._children: dict[str, list[str]] = {ROOT: []}

    # =========================================================================
    # Lookup
    # =========================================================================

    def get(self, path: str) -> Optional[Node]:
        return self._nodes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenGraph):
            return NotImplemented
        return list(self.walk()) == list(other.walk())

    def __repr__(self) -> str:
        tokens = sum(1 for _ in self.tokens())
        return f"TokenGraph(tokens={tokens}, groups={len(self._nodes) - tokens})"

    def children(self, path: str = ROOT) -> list[str]:
        """Full paths of the direct children of a group, in order."""
        if path != ROOT and path not in self._nodes:
            raise TokenNotFoundError(path)
        prefix = f"{path}." if path else ""
        return [prefix + name for name in self._children.get(path, [])]

    def _subtree(self, path: str) -> Iterator[str]:
        yield path
        for child in self.children(path):
            yield from self._subtree(child)

    def walk(self) -> Iterator[tuple[str, Node]]:
        """All nodes in document order (pre-order, groups before their children)."""
        for child in self.children():
            for path in self._subtree(child):
                yield path, self._nodes[path]

    def tokens(self) -> Iterator[tuple[str, DesignToken]]:
        for path, node in self.walk():
            if isinstance(node, DesignToken):
                yield path, node

    def references(self) -> list[tuple[str, str, Reference]]:
        """Every reference in the graph as ``(token path, field, reference)``."""
        return [
            (path, field_path, ref)
            for path, token in self.tokens()
            for field_path, _, ref in find_references(token.value, token.type)
        ]

    def referrers(self, path: str) -> list[str]:
        """Paths of tokens that reference ``path`` directly."""
        result = []
        for token_path, _, ref in self.references():
            if ref.path == path and token_path not in result:
                result.append(token_path)
        return result

    # =========================================================================
    # Editing
    # =========================================================================

    def _check_ancestors(self, path: str) -> list[str]:
        """Ancestor paths of ``path`` that do not exist yet; raises if one is a token."""
        segments = split_path(path)
        missing = []
        for depth in range(1, len(segments)):
            ancestor = ".".join(segments[:depth])
            current = self._nodes.get(ancestor)
            if current is None:
                missing.append(ancestor)
            elif isinstance(current, DesignToken):
                raise GraphStructureError(path, f"'{ancestor}' is a token and cannot contain children")
        return missing

    def _attach(self, path: str, node: Node) -> None:
        parent, _, name = path.rpartition(".")
        self._nodes[path] = node
        self._children.setdefault(parent, []).append(name)
        if isinstance(node, TokenGroup):
            self._children.setdefault(path, [])

    def set(self, path: str, node: Node) -> None:
        """
        Create or replace the node at ``path``.

        Missing ancestor groups are created. A token cannot replace a group
        and a group cannot replace a token.

        Raises:
            TokenPathError: If the path contains an invalid name
            GraphStructureError: On token/group replacement or a token ancestor
        """
        if not isinstance(node, (DesignToken, TokenGroup)):
            raise TypeError(f"Expected DesignToken or TokenGroup, got {type(node).__name__}")
        missing = self._check_ancestors(path)
        existing = self._nodes.get(path)
        if existing is not None and isinstance(existing, DesignToken) != isinstance(node, DesignToken):
            kinds = ("group", "token") if isinstance(existing, TokenGroup) else ("token", "group")
            raise GraphStructureError(path, f"cannot replace a {kinds[0]} with a {kinds[1]}")

        for ancestor in missing:
            self._attach(ancestor, TokenGroup())
        if existing is None:
            self._attach(path, node)
        else:
            self._nodes[path] = node

    def delete(self, path: str) -> None:
        """Remove a node; deleting a group removes all its descendants."""
        if path not in self._nodes:
            raise TokenNotFoundError(path)
        doomed = list(self._subtree(path))
        for doomed_path in doomed:
            del self._nodes[doomed_path]
            self._children.pop(doomed_path, None)
        parent, _, name = path.rpartition(".")
        self._children[parent].remove(name)
        logger.debug(f"Deleted '{path}' ({len(doomed)} nodes)")

    def move(self, old_path: str, new_path: str) -> int:
        """
        Rename or reparent a node together with its subtree.

        Every reference to ``old_path`` or one of its descendants is rewritten
        to the new location. A rename within the same parent keeps the
        sibling position; a move to another group appends.

        Returns:
            Number of references rewritten

        Raises:
            TokenNotFoundError: If ``old_path`` does not exist
            TokenExistsError: If ``new_path`` is taken
            GraphStructureError: If moving a group into itself
        """
        if old_path not in self._nodes:
            raise TokenNotFoundError(old_path)
        if new_path == old_path:
            return 0
        if new_path in self._nodes:
            raise TokenExistsError(new_path)
        if new_path.startswith(old_path + "."):
            raise GraphStructureError(new_path, f"cannot move '{old_path}' into itself")
        missing = self._check_ancestors(new_path)

        moved = list(self._subtree(old_path))
        old_parent, _, old_name = old_path.rpartition(".")
        new_parent, _, new_name = new_path.rpartition(".")
        siblings = self._children[old_parent]
        position = siblings.index(old_name)
        siblings.pop(position)

        for ancestor in missing:
            self._attach(ancestor, TokenGroup())

        nodes = {path: self._nodes.pop(path) for path in moved}
        child_lists = {path: self._children.pop(path) for path in moved if path in self._children}
        for path, node in nodes.items():
            self._nodes[new_path + path[len(old_path):]] = node
        for path, names in child_lists.items():
            self._children[new_path + path[len(old_path):]] = names

        if new_parent == old_parent:
            self._children[new_parent].insert(position, new_name)
        else:
            self._children[new_parent].append(new_name)

        rewritten = self._rewrite_references(old_path, new_path)
        logger.debug(f"Moved '{old_path}' to '{new_path}', rewrote {rewritten} references")
        return rewritten

    def _rewrite_references(self, old_path: str, new_path: str) -> int:
        count = 0
        prefix = old_path + "."

        def rewrite(ref: Reference, expected, field_path) -> Reference:
            nonlocal count
            if ref.path == old_path:
                count += 1
                return Reference(new_path)
            if ref.path.startswith(prefix):
                count += 1
                return Reference(new_path + ref.path[len(old_path):])
            return ref

        for _, token in self.tokens():
            if token.references:
                token.value = map_references(token.value, rewrite, token.type)
        return count

    def copy(self) -> "TokenGraph":
        return copy.deepcopy(self)

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, path: str) -> Union[ResolvedValue, ResolutionError]:
        """
        Resolve a token to its literal value, following references.

        A whole-value alias that fails returns the ResolutionError itself;
        composite tokens always return a ResolvedValue whose failed parts are
        ``None`` and listed in ``errors``.
        """
        node = self._nodes.get(path)
        if not isinstance(node, DesignToken):
            return ResolutionError(path, path, ResolutionKind.MISSING, chain=(path,))
        return self._resolve_token(path, node, (path,))

    def _resolve_token(
        self, path: str, token: DesignToken, chain: tuple[str, ...]
    ) -> Union[ResolvedValue, ResolutionError]:
        if isinstance(token.value, Reference):
            target = self._follow(token.value, token.type, "", chain)
            if isinstance(target, ResolutionError):
                return target
            return ResolvedValue(path, token.type, target.value, list(target.errors))

        errors: list[ResolutionError] = []

        def substitute(ref: Reference, expected: TokenType, field_path: str):
            target = self._follow(ref, expected, field_path, chain)
            if isinstance(target, ResolutionError):
                errors.append(target)
                return None
            errors.extend(replace(e, field=_join_field(field_path, e.field)) for e in target.errors)
            return target.value

        value = map_references(token.value, substitute, token.type)
        return ResolvedValue(path, token.type, value, errors)

    def _follow(
        self, ref: Reference, expected: TokenType, field_path: str, chain: tuple[str, ...]
    ) -> Union[ResolvedValue, ResolutionError]:
        origin = chain[0]
        route = list(chain)
        visited = set(chain)
        # Whole-value aliases are followed in a loop so chain length is not
        # bounded by the interpreter's recursion limit
        while True:
            target_path = ref.path
            route.append(target_path)
            if target_path in visited:
                kind = ResolutionKind.CYCLIC
                break
            target = self._nodes.get(target_path)
            if not isinstance(target, DesignToken):
                kind = ResolutionKind.MISSING
                break
            if expected is not None and target.type != expected:
                kind = ResolutionKind.TYPE_MISMATCH
                break
            if not isinstance(target.value, Reference):
                kind = None
                break
            visited.add(target_path)
            ref = target.value
            expected = target.type

        if kind is not None:
            return ResolutionError(origin, target_path, kind, field_path, tuple(route))
        return self._resolve_token(target_path, target, tuple(route))

    def validate(self) -> list[ResolutionError]:
        """Resolution errors of every token in the graph, in document order."""
        errors = []
        for path, _ in self.tokens():
            result = self.resolve(path)
            if isinstance(result, ResolutionError):
                errors.append(result)
            else:
                errors.extend(result.errors)
        return errors
