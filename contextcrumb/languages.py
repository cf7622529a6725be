"""Language registry for tree-sitter grammars and tag queries."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from importlib import resources
from typing import TYPE_CHECKING

from tree_sitter_language_pack import get_language, get_parser

if TYPE_CHECKING:
    from tree_sitter import Language, Parser, Query


@dataclass(frozen=True)
class TreeSitterLanguage:
    """A tree-sitter grammar, the file extensions it handles and its tag query."""

    name: str
    extensions: tuple[str, ...]

    def get_language(self) -> Language:
        """Get the tree-sitter Language object."""
        return get_language(self.name)

    def get_parser(self) -> Parser:
        """Get a configured tree-sitter Parser (cached per language)."""
        return _parser_for(self.name)

    def get_tag_query(self) -> Query:
        """Compile the packaged tag query for this language (cached)."""
        return _tag_query_for(self.name)


LANGUAGES: dict[str, TreeSitterLanguage] = {
    "python": TreeSitterLanguage(name="python", extensions=(".py", ".pyi")),
}

EXTENSION_MAP: dict[str, str] = {
    ext: lang.name for lang in LANGUAGES.values() for ext in lang.extensions
}


@functools.cache
def _parser_for(name: str) -> Parser:
    return get_parser(name)


@functools.cache
def _tag_query_for(name: str) -> Query:
    from tree_sitter import Query as TSQuery

    return TSQuery(get_language(name), load_query_source(name))


def load_query_source(language_name: str) -> str:
    """Read the ``<language_name>.scm`` tag query shipped with the package.

    Raises:
        FileNotFoundError: If no query file exists for the language.
    """
    query_file = resources.files("contextcrumb.queries") / f"{language_name}.scm"
    return query_file.read_text(encoding="utf-8")


def language_for_extension(ext: str) -> TreeSitterLanguage | None:
    """Look up a language by file extension, including the dot (e.g. ".py")."""
    lang_name = EXTENSION_MAP.get(ext)
    if lang_name is None:
        return None
    return LANGUAGES[lang_name]
