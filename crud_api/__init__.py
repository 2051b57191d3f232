"""Users and their sweets over JSON:API, backed by SQLAlchemy and served by FastAPI."""

__version__ = "0.1.0"
