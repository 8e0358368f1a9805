"""Image discovery."""
