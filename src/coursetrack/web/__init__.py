"""Web API for coursetrack."""
