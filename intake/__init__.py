"""CSV upload intake service."""
