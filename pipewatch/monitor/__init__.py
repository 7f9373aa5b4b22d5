"""Monitor layer — aggregation, the snapshot cache, and view rendering.

Modules
-------
aggregator
    ``aggregate`` folds a ``PipelineSnapshot`` into one status label;
    ``build_rows`` derives the summary rows for a cycle.
state
    ``DashboardState`` holds the latest complete snapshot set.
renderer
    Summary cells, detail blocks and Rich renderables.
humanize
    Relative time strings for the detail view.
"""
