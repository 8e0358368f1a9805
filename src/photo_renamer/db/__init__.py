"""Library persistence."""
