"""Tree-sitter parsing and tag extraction with export detection."""

from __future__ import annotations

from pathlib import Path

from tree_sitter import Node, QueryCursor

from contextcrumb.languages import TreeSitterLanguage
from contextcrumb.models import SymbolKind, Tag, TagKind

_CAPTURE_MAP: dict[str, tuple[TagKind, SymbolKind]] = {
    "definition.class": (TagKind.DEFINITION, SymbolKind.CLASS),
    "definition.function": (TagKind.DEFINITION, SymbolKind.FUNCTION),
    "definition.constant": (TagKind.DEFINITION, SymbolKind.CONST),
    "reference.call": (TagKind.REFERENCE, SymbolKind.FUNCTION),
    "reference.import": (TagKind.REFERENCE, SymbolKind.CONST),
    "reference.class": (TagKind.REFERENCE, SymbolKind.CLASS),
    "reference.type": (TagKind.REFERENCE, SymbolKind.TYPE),
}

_INTERFACE_BASES = frozenset({"Protocol", "typing.Protocol"})
_TYPE_FACTORIES = frozenset({"NewType", "typing.NewType"})


def extract_tags(file_path: Path, language: TreeSitterLanguage) -> list[Tag]:
    """Parse a file and extract its definition and reference tags.

    Top-level public definitions are marked exported. When the module
    declares ``__all__``, only the names listed there are exported.

    Args:
        file_path: Absolute path to the source file.
        language: The tree-sitter language configuration.

    Returns:
        Tags in query match order. A reference to the same name on the
        same line is recorded once.

    Raises:
        FileNotFoundError: If file_path does not exist.
    """
    source = file_path.read_bytes()
    if not source:
        return []

    tree = language.get_parser().parse(source)
    cursor = QueryCursor(language.get_tag_query())
    public_names = _module_all(tree.root_node)

    tags: list[Tag] = []
    seen_refs: set[tuple[str, int]] = set()
    for _pattern_idx, match_dict in cursor.matches(tree.root_node):
        name_nodes = match_dict.get("name", [])
        if not name_nodes:
            continue
        name_node = name_nodes[0]
        name = _text(name_node)
        line = name_node.start_point[0] + 1

        for capture_name, nodes in match_dict.items():
            if capture_name not in _CAPTURE_MAP:
                continue
            tag_kind, symbol_kind = _CAPTURE_MAP[capture_name]

            if tag_kind == TagKind.REFERENCE:
                if (name, line) in seen_refs:
                    continue
                seen_refs.add((name, line))
                tags.append(Tag(name, tag_kind, symbol_kind, line))
                continue

            def_node = nodes[0]
            effective_name = name
            exported = False
            class_name = (
                _enclosing_class(def_node)
                if symbol_kind == SymbolKind.FUNCTION
                else None
            )
            if class_name:
                symbol_kind = SymbolKind.METHOD
                effective_name = f"{class_name}.{name}"
            else:
                symbol_kind = _refine_kind(def_node, symbol_kind)
                if _is_top_level(def_node):
                    exported = _is_public(name, public_names)

            tags.append(Tag(effective_name, tag_kind, symbol_kind, line, exported))

    return tags


def _is_public(name: str, public_names: set[str] | None) -> bool:
    if public_names is not None:
        return name in public_names
    return not name.startswith("_")


def _module_all(root: Node) -> set[str] | None:
    """Return the names listed in a module-level ``__all__``, if declared."""
    for statement in root.children:
        if statement.type != "expression_statement" or not statement.children:
            continue
        assignment = statement.children[0]
        if assignment.type != "assignment":
            continue
        left = assignment.child_by_field_name("left")
        right = assignment.child_by_field_name("right")
        if left is None or right is None or _text(left) != "__all__":
            continue
        if right.type not in ("list", "tuple"):
            return None
        return {
            _text(child).strip("'\"")
            for child in right.children
            if child.type == "string"
        }
    return None


def _refine_kind(def_node: Node, symbol_kind: SymbolKind) -> SymbolKind:
    """Map Protocol classes to interfaces and type aliases to types."""
    if symbol_kind == SymbolKind.CLASS:
        bases = def_node.child_by_field_name("superclasses")
        if bases is not None and any(
            _text(base) in _INTERFACE_BASES for base in bases.children
        ):
            return SymbolKind.INTERFACE
    elif symbol_kind == SymbolKind.CONST:
        annotation = def_node.child_by_field_name("type")
        if annotation is not None and _text(annotation).endswith("TypeAlias"):
            return SymbolKind.TYPE
        value = def_node.child_by_field_name("right")
        if value is not None and value.type == "call":
            factory = value.child_by_field_name("function")
            if factory is not None and _text(factory) in _TYPE_FACTORIES:
                return SymbolKind.TYPE
    return symbol_kind


def _is_top_level(def_node: Node) -> bool:
    """Check whether a definition sits directly in the module body."""
    parent = def_node.parent
    if parent is not None and parent.type in (
        "decorated_definition",
        "expression_statement",
    ):
        parent = parent.parent
    return parent is not None and parent.type == "module"


def _enclosing_class(func_node: Node) -> str | None:
    """Return the name of the class a function is defined in, if any."""
    parent = func_node.parent
    if parent is not None and parent.type == "decorated_definition":
        parent = parent.parent
    if parent is None or parent.type != "block":
        return None
    class_node = parent.parent
    if class_node is None or class_node.type != "class_definition":
        return None
    name_node = class_node.child_by_field_name("name")
    return _text(name_node) if name_node is not None else None


def _text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""
