"""Show calendar scraper for OKC/Tulsa DIY and independent venues."""

__version__ = "1.0.0"
