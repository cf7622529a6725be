"""Selection of exported definitions to show for each ranked file."""

from __future__ import annotations

from contextcrumb.models import RankedFile, Signature, SymbolGraph, SymbolKind, TagKind

MAX_SIGNATURES_PER_FILE = 15

_SIGNATURE_FORMATS: dict[SymbolKind, str] = {
    SymbolKind.FUNCTION: "function {name}()",
    SymbolKind.CLASS: "class {name}",
    SymbolKind.INTERFACE: "interface {name}",
    SymbolKind.TYPE: "type {name}",
    SymbolKind.CONST: "const {name}",
    SymbolKind.METHOD: "{name}()",
}


def format_tag_as_signature(name: str, symbol_kind: SymbolKind | str) -> str:
    """Render a symbol as a one-line declaration.

    Unknown kinds render as the bare name.

    Examples:
        >>> format_tag_as_signature("getData", SymbolKind.FUNCTION)
        'function getData()'
        >>> format_tag_as_signature("MyClass", "class")
        'class MyClass'
    """
    try:
        kind = SymbolKind(symbol_kind)
    except ValueError:
        return name
    return _SIGNATURE_FORMATS[kind].format(name=name)


def extract_signatures_for_ranked_files(
    ranked_files: list[RankedFile],
    graph: SymbolGraph,
    *,
    max_per_file: int = MAX_SIGNATURES_PER_FILE,
) -> dict[str, list[Signature]]:
    """Collect the most referenced exported definitions of each ranked file.

    Args:
        ranked_files: Files in rank order.
        graph: The symbol graph the files were ranked from.
        max_per_file: Cap on signatures kept per file.

    Returns:
        Path -> signatures sorted by reference count (descending), then
        line. Insertion follows ranked_files; files without exported
        definitions are left out.
    """
    signatures: dict[str, list[Signature]] = {}
    for ranked in ranked_files:
        file_sigs = [
            Signature(
                file=ranked.path,
                line=tag.line,
                text=format_tag_as_signature(tag.name, tag.symbol_kind),
                type=tag.symbol_kind,
                name=tag.name,
                refs=len(graph.references.get(tag.name, [])),
            )
            for tag in graph.file_to_tags.get(ranked.path, [])
            if tag.kind == TagKind.DEFINITION and tag.exported
        ]
        file_sigs.sort(key=lambda sig: (-sig.refs, sig.line))
        if file_sigs:
            signatures[ranked.path] = file_sigs[:max_per_file]
    return signatures
