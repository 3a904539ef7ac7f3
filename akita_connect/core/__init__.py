"""Core domain helpers: events, key encoding and token verification."""
