"""Tagging and reverting actions."""
