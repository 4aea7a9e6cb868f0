"""Core analysis engine: tree-sitter parsing and DI checks."""
