"""cachesweep: removes cache records orphaned by caching agents that are no longer configured."""
