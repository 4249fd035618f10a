"""Village disease-risk surveillance and outbreak cluster detection."""

__version__ = "0.1.0"
