"""Moviematic - movie catalog API with reviews, watchlists and curated homepage sections."""

__version__ = "0.1.0"
