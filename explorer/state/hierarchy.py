"""
Hierarchy navigation for the query state.

``source`` is the dimension currently grouped by and ``target`` the next one
in its hierarchy. At the bottom of a hierarchy the pair collapses: ``target``
is the last dimension and ``source`` the one before it (or the same dimension
when the hierarchy has only one).
"""

import logging
from typing import List, Optional, Tuple

from explorer.package_model import PackageModel
from .models import Breadcrumb, QueryState

logger = logging.getLogger(__name__)


def resolve_source_target(groups: List[str],
                          package_model: PackageModel) -> Tuple[Optional[str], Optional[str]]:
    """
    Compute the (source, target) pair for a grouping.

    Args:
        groups: Current groups axis; only the first key is considered
        package_model: Package whose hierarchies are searched

    Returns:
        Tuple of dimension keys, (None, None) if the group is not in any hierarchy
    """
    group_key = groups[0] if groups else None
    hierarchy = package_model.find_hierarchy(group_key)
    if hierarchy is None:
        return None, None

    dimensions = hierarchy.dimensions
    index = hierarchy.index_of(group_key)

    if index < len(dimensions) - 1:
        return dimensions[index].key, dimensions[index + 1].key

    target = dimensions[-1]
    source = dimensions[-2] if len(dimensions) > 1 else target
    return source.key, target.key


def update_source_target(state: QueryState, package_model: PackageModel) -> QueryState:
    """Recompute source/target of a scratch state in place and return it."""
    state.source, state.target = resolve_source_target(state.groups, package_model)
    logger.debug(f"Resolved source={state.source} target={state.target} for groups={state.groups}")
    return state


def get_breadcrumbs(state: QueryState, package_model: PackageModel) -> List[Breadcrumb]:
    """
    Drill-down trail leading to the current group.

    One breadcrumb per level of the group's hierarchy, from the top down to
    the current group. Each snapshot groups by that level and drops the
    filters recorded on it and on every finer level, so applying it walks
    back up the drill-down path. ``value`` is the last value chosen on the
    coarser level (None for the top level).
    """
    group_key = state.groups[0] if state.groups else None
    hierarchy = package_model.find_hierarchy(group_key)
    if hierarchy is None:
        return []

    keys = [dimension.key for dimension in hierarchy.dimensions]
    current = hierarchy.index_of(group_key)

    breadcrumbs = []
    for index in range(current + 1):
        dropped = set(keys[index:])
        filters = {
            key: list(values)
            for key, values in state.filters.items()
            if key not in dropped
        }
        value = None
        if index > 0:
            previous_values = state.filters.get(keys[index - 1]) or []
            value = previous_values[-1] if previous_values else None
        breadcrumbs.append(Breadcrumb(
            groups=[keys[index]],
            filters=filters,
            dimension=keys[index],
            value=value,
        ))
    return breadcrumbs
