"""Background tasks."""

from .orphan_sweep import OrphanSweepScheduler

__all__ = ["OrphanSweepScheduler"]
