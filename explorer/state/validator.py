"""
Validation and per-visualization defaulting of normalized parameters.

The first resolvable visualization decides the type of the whole query.
Each visualization type maps to a function building its defaults from the
package model; supplied values win over defaults field by field.
"""

import logging
from copy import deepcopy
from typing import Any, Callable, Dict, Optional

from core.exceptions import PackageModelError
from explorer.package_model import Dimension, PackageModel
from explorer.visualizations import VisualizationRegistry, VisualizationType, get_registry
from .hierarchy import resolve_source_target
from .models import DEFAULT_LANG, DEFAULT_ORDER_DIRECTION, PartialState
from .normalizer import coerce_filters

logger = logging.getLogger(__name__)


def _measure_defaults(package_model: PackageModel) -> Dict[str, Any]:
    return {'measures': [package_model.first_measure.key]}


def _order_by_first_measure(package_model: PackageModel) -> Dict[str, str]:
    return {
        'key': package_model.first_measure.key,
        'direction': DEFAULT_ORDER_DIRECTION,
    }


def _with_source_target(defaults: Dict[str, Any], package_model: PackageModel) -> Dict[str, Any]:
    defaults['source'], defaults['target'] = resolve_source_target(defaults['groups'], package_model)
    return defaults


def drilldown_defaults(package_model: PackageModel) -> Dict[str, Any]:
    defaults = _measure_defaults(package_model)
    defaults['groups'] = [package_model.hierarchies[0].dimensions[0].key]
    defaults['order_by'] = _order_by_first_measure(package_model)
    return _with_source_target(defaults, package_model)


def sortable_series_defaults(package_model: PackageModel) -> Dict[str, Any]:
    defaults = drilldown_defaults(package_model)
    defaults['series'] = []
    return defaults


def time_series_defaults(package_model: PackageModel) -> Dict[str, Any]:
    defaults = _measure_defaults(package_model)
    defaults['groups'] = []
    defaults['series'] = []
    defaults['order_by'] = {}
    defaults['source'] = None
    defaults['target'] = None
    return defaults


def location_defaults(package_model: PackageModel) -> Dict[str, Any]:
    if not package_model.location_hierarchies:
        raise PackageModelError("Package has no location hierarchy",
                                package_id=package_model.id, collection='location_hierarchies')
    defaults = _measure_defaults(package_model)
    defaults['groups'] = [package_model.location_hierarchies[0].dimensions[0].key]
    defaults['order_by'] = _order_by_first_measure(package_model)
    return _with_source_target(defaults, package_model)


def choose_column_dimension(package_model: PackageModel) -> Dimension:
    """
    Pick the pivot table column dimension.

    Prefers the first date/time dimension (one per column hierarchy) that has
    more than one value, else the first dimension of the first column hierarchy.
    """
    if not package_model.column_hierarchies:
        raise PackageModelError("Package has no column hierarchy",
                                package_id=package_model.id, collection='column_hierarchies')

    for hierarchy in package_model.column_hierarchies:
        dimension = next((item for item in hierarchy.dimensions if item.is_datetime), None)
        if dimension is not None and dimension.values and len(dimension.values) > 1:
            return dimension
    return package_model.column_hierarchies[0].dimensions[0]


def pivot_table_defaults(package_model: PackageModel) -> Dict[str, Any]:
    defaults = _measure_defaults(package_model)
    defaults['rows'] = [package_model.hierarchies[0].dimensions[0].key]
    defaults['columns'] = [choose_column_dimension(package_model).key]
    defaults['order_by'] = _order_by_first_measure(package_model)
    return defaults


TYPE_DEFAULTS: Dict[VisualizationType, Callable[[PackageModel], Dict[str, Any]]] = {
    VisualizationType.DRILLDOWN: drilldown_defaults,
    VisualizationType.SORTABLE_SERIES: sortable_series_defaults,
    VisualizationType.TIME_SERIES: time_series_defaults,
    VisualizationType.LOCATION: location_defaults,
    VisualizationType.PIVOT_TABLE: pivot_table_defaults,
}


def build_type_defaults(visualization_type: VisualizationType,
                        package_model: PackageModel) -> Dict[str, Any]:
    """Defaults a query of the given visualization type starts from."""
    return TYPE_DEFAULTS[visualization_type](package_model)


def validate_url_params(params: PartialState,
                        package_model: PackageModel,
                        registry: Optional[VisualizationRegistry] = None) -> PartialState:
    """
    Apply visualization-specific defaults to normalized parameters.

    Args:
        params: Output of normalize_url_params
        package_model: Package the defaults are taken from
        registry: Visualization registry (process-wide one if omitted)

    Returns:
        Partial state. Only 'lang' when no visualization resolves.

    Raises:
        PackageModelError: If the package lacks the hierarchy a type needs
    """
    registry = registry or get_registry()
    result: PartialState = {'lang': params.get('lang') or DEFAULT_LANG}

    visualizations = registry.get_visualizations_by_ids(params.get('visualizations'))
    if not visualizations:
        return result

    visualization_type = visualizations[0].type
    defaults = build_type_defaults(visualization_type, package_model)
    defaults['filters'] = {}

    for key, default in defaults.items():
        value = params.get(key)
        result[key] = deepcopy(value) if value else default

    result['filters'] = coerce_filters(result['filters'])

    # groups is always single-select; series only for time series
    if len(result.get('groups', [])) > 1:
        result['groups'] = result['groups'][:1]
    if visualization_type == VisualizationType.TIME_SERIES and len(result['series']) > 1:
        result['series'] = result['series'][:1]

    if 'source' in defaults and result.get('groups'):
        result['source'], result['target'] = resolve_source_target(result['groups'], package_model)

    result['visualizations'] = [item.id for item in visualizations if item.type == visualization_type]
    if len(result['visualizations']) < len(visualizations):
        logger.debug(f"Dropped visualizations not of type {visualization_type.value}")

    return result
