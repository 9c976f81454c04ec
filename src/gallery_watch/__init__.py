"""Watch a gallery shop page and text new paintings as they are listed."""

__version__ = "0.1.0"
