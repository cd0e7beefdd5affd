"""Infrastructure adapters: logging, database engine, metrics."""
