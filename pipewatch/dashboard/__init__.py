"""Textual dashboard for pipewatch."""

from pipewatch.dashboard.app import PipelineDashboardApp

__all__ = ["PipelineDashboardApp"]
