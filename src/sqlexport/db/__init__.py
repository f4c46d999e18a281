"""Database access for query sources."""
