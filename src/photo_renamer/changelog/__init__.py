"""Rename history log."""
