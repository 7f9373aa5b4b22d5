"""pipewatch: live terminal dashboard for continuous-delivery pipelines.

Polls AWS CodePipeline for a watched subset of pipelines, folds every
action status into one summary state per pipeline, and renders the result
in a refreshing table with a drill-down detail list.

Packages
--------
core
    Rate limiter, pipeline fetcher and the refresh loop.
monitor
    Status aggregation, the dashboard state cache and view renderers.
bridge
    Remote API client protocol and the boto3 CodePipeline adapter.
dashboard
    The Textual full-screen application.
cli
    The ``pipewatch`` Typer command.
"""

__version__ = "0.1.0"

from pipewatch.core.refresh_loop import RefreshLoop
from pipewatch.monitor.aggregator import aggregate
from pipewatch.monitor.state import DashboardState

__all__ = ["RefreshLoop", "DashboardState", "aggregate", "__version__"]
