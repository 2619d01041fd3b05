"""HTTP control surface for the cleanup service."""
