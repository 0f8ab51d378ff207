"""gpr - publish Android release artifacts to Google Play."""

__version__ = "0.3.0"
