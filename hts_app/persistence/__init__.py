"""SQLite-backed trade data store and description lookup."""
