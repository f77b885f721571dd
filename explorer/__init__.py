"""
Explorer query-state engine.

Derives, validates and transforms the declarative query (measures, axes,
filters, ordering, visualizations) behind a multi-dimensional data explorer.
No data is fetched or aggregated here.
"""

from .package_model import PackageModel, Measure, Dimension, Hierarchy
from .visualizations import (
    Visualization,
    VisualizationRegistry,
    VisualizationType,
    get_registry,
    set_registry,
)
from . import state
from .state import QueryState, Breadcrumb

__all__ = [
    'PackageModel',
    'Measure',
    'Dimension',
    'Hierarchy',
    'Visualization',
    'VisualizationRegistry',
    'VisualizationType',
    'get_registry',
    'set_registry',
    'state',
    'QueryState',
    'Breadcrumb',
]
