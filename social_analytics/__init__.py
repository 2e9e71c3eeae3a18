"""Multi-tenant social media post analytics API."""

__version__ = "1.0.0"
