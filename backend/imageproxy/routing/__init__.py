"""Source prefix matching and remote URL extraction."""
