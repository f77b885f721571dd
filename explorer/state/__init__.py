"""
Query state management for the Explorer.

This package holds the query state model and the pure functions that build
it from URL parameters and move it from one user action to the next.
"""

from .models import QueryState, Breadcrumb, OrderBy, PartialState, AXES, get_default_state
from .normalizer import normalize_url_params, normalize_order_direction, coerce_filters
from .validator import validate_url_params, build_type_defaults, choose_column_dimension
from .hierarchy import update_source_target, resolve_source_target, get_breadcrumbs
from .transitions import (
    init,
    change_measure,
    change_filter,
    clear_filter,
    clear_filters,
    change_dimension,
    clear_dimension,
    clear_dimensions,
    drill_down,
    apply_breadcrumb,
    change_order_by,
    add_visualization,
    remove_visualization,
    remove_all_visualizations,
    update_from_params,
)

__all__ = [
    'QueryState',
    'Breadcrumb',
    'OrderBy',
    'PartialState',
    'AXES',
    'get_default_state',
    'normalize_url_params',
    'normalize_order_direction',
    'coerce_filters',
    'validate_url_params',
    'build_type_defaults',
    'choose_column_dimension',
    'update_source_target',
    'resolve_source_target',
    'get_breadcrumbs',
    'init',
    'change_measure',
    'change_filter',
    'clear_filter',
    'clear_filters',
    'change_dimension',
    'clear_dimension',
    'clear_dimensions',
    'drill_down',
    'apply_breadcrumb',
    'change_order_by',
    'add_visualization',
    'remove_visualization',
    'remove_all_visualizations',
    'update_from_params',
]
