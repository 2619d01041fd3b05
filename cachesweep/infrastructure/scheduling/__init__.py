"""Scheduling: periodic runner for the cleanup agent."""

from cachesweep.infrastructure.scheduling.scheduler import CleanupScheduler

__all__ = ["CleanupScheduler"]
