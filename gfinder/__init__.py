"""G-Finder: advanced Google Custom Search queries over Telegram."""

__version__ = "0.1.0"
