"""Streaks, aggregates and insight signals derived from journal entries."""

from .snapshot import AnalyticsEngine, build_snapshot

__all__ = ["AnalyticsEngine", "build_snapshot"]
