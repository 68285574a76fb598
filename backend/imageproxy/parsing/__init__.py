"""Option grammars: legacy path tokens and query parameters."""
