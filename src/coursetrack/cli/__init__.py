"""Command line interface for coursetrack."""
