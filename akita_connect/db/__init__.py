"""Database engine, session and model packages."""
