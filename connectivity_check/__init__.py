"""Network connectivity check for device-management enrollment endpoints."""

__version__ = "1.0.0"
