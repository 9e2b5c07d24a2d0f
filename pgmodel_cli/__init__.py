"""pgmodel-cli - Extract entity models from PostgreSQL catalogs."""

__version__ = "0.1.0"
