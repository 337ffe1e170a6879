"""leafpress — build-time content pipeline for article and documentation sites."""

__version__ = "0.4.0"
