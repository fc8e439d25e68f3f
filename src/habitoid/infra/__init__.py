"""Infrastructure: database engine, sessions and repositories."""
