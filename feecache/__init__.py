"""Rate-limited, periodically refreshed network fee cache."""

__version__ = "1.0.0"
