"""Tree-sitter tag queries, one ``<language>.scm`` file per language."""
