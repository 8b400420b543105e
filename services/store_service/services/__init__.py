"""Store business logic."""
