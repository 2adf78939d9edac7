"""Depth chart business operations."""

from .service import DepthChartService, backups_for, insert_at_depth

__all__ = ["DepthChartService", "backups_for", "insert_at_depth"]
