"""coursetrack: progress, badges and certificates for the five-day AI course."""

__version__ = "0.1.0"
