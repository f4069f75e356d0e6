"""Registration and capacity control services."""
