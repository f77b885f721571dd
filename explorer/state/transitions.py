"""
Transition engine for the Explorer query state.

Every operation takes a QueryState and returns a new one. The input is
copied on entry and never modified; nothing in the result shares a
container with the input or with the arguments.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from explorer.package_model import PackageModel
from explorer.visualizations import VisualizationRegistry, VisualizationType, get_registry
from .hierarchy import update_source_target
from .models import (
    AXES,
    DEFAULT_ORDER_DIRECTION,
    Breadcrumb,
    QueryState,
    get_default_state,
)
from .normalizer import as_list, coerce_filters, normalize_order_direction, normalize_url_params
from .validator import build_type_defaults, validate_url_params

logger = logging.getLogger(__name__)


def _without(values, item):
    return [value for value in values if value != item]


def _check_axis(axis: str) -> None:
    if axis not in AXES:
        raise ValueError(f"Unknown axis '{axis}', expected one of {AXES}")


# Initialization

def init(package_model: PackageModel,
         initial_params: Optional[Dict[str, Any]] = None,
         registry: Optional[VisualizationRegistry] = None) -> QueryState:
    """
    Build the initial query state of a package.

    Args:
        package_model: Package being explored
        initial_params: Raw parameter bag (e.g. from the URL)
        registry: Visualization registry (process-wide one if omitted)

    Returns:
        New QueryState
    """
    params = normalize_url_params(initial_params or {}, package_model)
    params = validate_url_params(params, package_model, registry)

    date_time_hierarchy = package_model.date_time_hierarchies[0]
    state = QueryState.from_dict(get_default_state(
        package_id=package_model.id,
        country_code=package_model.country_code,
        date_time_dimension=date_time_hierarchy.dimensions[0].key,
    ))
    state.update(params)

    logger.debug(f"Initialized state for package {package_model.id}: "
                 f"visualizations={state.visualizations}")
    return state


# Measures

def change_measure(state: QueryState, measure: str) -> QueryState:
    """Select a single measure; an ordering by the old measure follows it."""
    result = state.copy()
    order_by_is_measure = result.order_by.get('key') in result.measures
    result.measures = [measure]
    if order_by_is_measure:
        result.order_by = {'key': measure, 'direction': DEFAULT_ORDER_DIRECTION}
    return result


# Filters

def change_filter(state: QueryState, filter_key: str, filter_value: str) -> QueryState:
    """Add a value to a filter, moving it to the end if it is already selected."""
    result = state.copy()
    values = _without(result.filters.get(filter_key, []), filter_value)
    values.append(filter_value)
    result.filters[filter_key] = values
    return result


def clear_filter(state: QueryState, filter_key: str, value: Optional[str] = None) -> QueryState:
    """Remove one value of a filter, or the whole filter when no value is given."""
    result = state.copy()
    if value is None:
        result.filters.pop(filter_key, None)
        return result

    values = _without(result.filters.get(filter_key, []), value)
    if values:
        result.filters[filter_key] = values
    else:
        result.filters.pop(filter_key, None)
    return result


def clear_filters(state: QueryState) -> QueryState:
    result = state.copy()
    result.filters = {}
    return result


# Dimensions

def _is_single_select(state: QueryState, axis: str, registry: VisualizationRegistry) -> bool:
    # groups is always single-select, series only for time series
    if axis == 'groups':
        return True
    if axis == 'series':
        visualization = registry.get_visualization_by_id(
            state.visualizations[0] if state.visualizations else None)
        return visualization is not None and visualization.type == VisualizationType.TIME_SERIES
    return False


def change_dimension(state: QueryState, axis: str, dimension: str,
                     package_model: PackageModel,
                     registry: Optional[VisualizationRegistry] = None) -> QueryState:
    """
    Place a dimension on an axis.

    Single-select axes are replaced; multi-select axes toggle the dimension
    to the end of the list. Changing groups refreshes source/target.
    """
    _check_axis(axis)
    registry = registry or get_registry()
    result = state.copy()
    current = getattr(result, axis)

    if _is_single_select(result, axis, registry):
        order_by_is_group = axis == 'groups' and result.order_by.get('key') in current
        setattr(result, axis, [dimension])
        if order_by_is_group:
            result.order_by = {'key': dimension, 'direction': DEFAULT_ORDER_DIRECTION}
    else:
        values = _without(current, dimension)
        values.append(dimension)
        setattr(result, axis, values)

    if axis == 'groups':
        update_source_target(result, package_model)

    return result


def clear_dimension(state: QueryState, axis: str, dimension: str,
                    package_model: PackageModel) -> QueryState:
    _check_axis(axis)
    result = state.copy()
    setattr(result, axis, _without(getattr(result, axis), dimension))

    if axis == 'groups':
        update_source_target(result, package_model)

    return result


def clear_dimensions(state: QueryState, axis: str) -> QueryState:
    _check_axis(axis)
    result = state.copy()
    setattr(result, axis, [])

    if axis == 'groups':
        result.source = None
        result.target = None

    return result


# Hierarchy navigation

def drill_down(state: QueryState, value: str, package_model: PackageModel) -> QueryState:
    """
    Group by the next dimension of the current group's hierarchy.

    The chosen value is recorded as a filter on the current group. At the
    bottom of a hierarchy (or outside any hierarchy) groups and filters are
    left as they are.
    """
    result = state.copy()

    group_key = result.groups[0] if result.groups else None
    hierarchy = package_model.find_hierarchy(group_key)

    if hierarchy is not None:
        index = hierarchy.index_of(group_key) + 1
        if index < len(hierarchy.dimensions):
            next_group = hierarchy.dimensions[index]
            result.filters.setdefault(group_key, []).append(value)
            result.groups = [next_group.key]
            logger.debug(f"Drilled down from {group_key}={value} to {next_group.key}")
        else:
            logger.debug(f"Cannot drill down below {group_key}")

    update_source_target(result, package_model)
    return result


def apply_breadcrumb(state: QueryState,
                     breadcrumb: Union[Breadcrumb, Mapping[str, Any]],
                     package_model: PackageModel) -> QueryState:
    """
    Restore the groups and filters saved in a breadcrumb.

    Snapshots may come from outside (e.g. a stored URL), so they are brought
    into state shape: groups keeps its first key, filter values become lists.
    """
    if isinstance(breadcrumb, Breadcrumb):
        groups, filters = breadcrumb.groups, breadcrumb.filters
    else:
        groups, filters = breadcrumb.get('groups'), breadcrumb.get('filters')

    result = state.copy()
    result.groups = [item for item in as_list(groups) if item][:1]
    result.filters = coerce_filters(filters)

    update_source_target(result, package_model)
    return result


# Ordering

def change_order_by(state: QueryState, key: Optional[str], direction: Any) -> QueryState:
    result = state.copy()
    result.order_by = {
        'key': key,
        'direction': normalize_order_direction(direction),
    }
    return result


# Visualizations

def _init_params(state: QueryState, package_model: PackageModel,
                 registry: VisualizationRegistry) -> None:
    visualization = registry.get_visualization_by_id(state.visualizations[0])
    if visualization is not None:
        state.update(build_type_defaults(visualization.type, package_model))


def _clear_params(state: QueryState) -> None:
    state.update(get_default_state(lang=state.lang))
    state.source = None
    state.target = None


def add_visualization(state: QueryState, visualization_id: str, toggle: bool,
                      package_model: PackageModel,
                      registry: Optional[VisualizationRegistry] = None) -> QueryState:
    """
    Add a visualization, or remove it when it is present and toggle is set.

    A visualization of a different type than the active ones replaces them.
    An empty result clears the query; a single remaining visualization
    re-initializes the query with its type defaults.
    """
    registry = registry or get_registry()
    result = state.copy()

    visualization = registry.get_visualization_by_id(visualization_id)
    if visualization is None:
        logger.warning(f"Ignoring unknown visualization: {visualization_id}")
        return result

    if visualization_id in result.visualizations:
        if not toggle:
            return result
        result.visualizations = _without(result.visualizations, visualization_id)
    else:
        active = registry.get_visualizations_by_ids(result.visualizations)
        if active and active[0].type != visualization.type:
            logger.debug(f"Switching visualization type from {active[0].type.value} "
                         f"to {visualization.type.value}")
            result.visualizations = []
        result.visualizations.append(visualization_id)

    if not result.visualizations:
        _clear_params(result)
    elif len(result.visualizations) == 1:
        _init_params(result, package_model, registry)

    return result


def remove_visualization(state: QueryState, visualization_id: str,
                         package_model: PackageModel) -> QueryState:
    result = state.copy()
    result.visualizations = _without(result.visualizations, visualization_id)
    if not result.visualizations:
        _clear_params(result)
    return result


def remove_all_visualizations(state: QueryState, package_model: PackageModel) -> QueryState:
    result = state.copy()
    _clear_params(result)
    return result


# External parameters

def update_from_params(state: QueryState, url_params: Optional[Dict[str, Any]],
                       package_model: PackageModel,
                       registry: Optional[VisualizationRegistry] = None) -> QueryState:
    """
    Rebuild the query from an externally changed parameter bag.

    Package identifiers are kept; every query field is reset to empty and
    then filled from the validated parameters.
    """
    params = normalize_url_params(url_params or {}, package_model)
    params = validate_url_params(params, package_model, registry)

    result = state.copy()
    result.update(get_default_state())
    result.update(params)

    update_source_target(result, package_model)
    return result
