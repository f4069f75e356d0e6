"""RSVP registration and capacity control service."""
