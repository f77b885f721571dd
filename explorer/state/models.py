"""
State models for the Explorer query state.

QueryState is treated as an immutable value: transitions copy it with
copy() and only ever mutate the copy. Partial states (the output of the
normalizer and validator) are plain dictionaries keyed by QueryState
field names.
"""

from copy import deepcopy
from dataclasses import dataclass, field, fields
from typing import Dict, List, Any, Optional
from typing_extensions import TypedDict


AXES = ('groups', 'series', 'rows', 'columns')

ORDER_ASC = 'asc'
ORDER_DESC = 'desc'
DEFAULT_ORDER_DIRECTION = ORDER_DESC

DEFAULT_LANG = 'en'


class OrderBy(TypedDict, total=False):
    """Ordering of the query result; empty when unordered."""
    key: Optional[str]
    direction: str  # 'asc' or 'desc'


class PartialState(TypedDict, total=False):
    """Subset of QueryState fields produced by normalization and validation."""
    lang: str
    measures: List[str]
    groups: List[str]
    series: List[str]
    rows: List[str]
    columns: List[str]
    filters: Dict[str, Any]
    order_by: OrderBy
    visualizations: List[str]
    source: Optional[str]
    target: Optional[str]


@dataclass
class Breadcrumb:
    """
    Saved point of a drill-down path.

    ``groups`` and ``filters`` are the snapshot restored by apply_breadcrumb;
    ``dimension`` and ``value`` describe the step for display.
    """
    groups: List[str] = field(default_factory=list)
    filters: Dict[str, List[str]] = field(default_factory=dict)
    dimension: Optional[str] = None
    value: Optional[str] = None


@dataclass
class QueryState:
    """
    Analytical query currently shown by the explorer.

    ``package_id``, ``country_code`` and ``date_time_dimension`` are copied from
    the package model at initialization. ``source`` and ``target`` are derived
    from ``groups`` by the hierarchy navigator.
    """

    package_id: Optional[str] = None
    country_code: Optional[str] = None
    date_time_dimension: Optional[str] = None
    lang: str = DEFAULT_LANG

    measures: List[str] = field(default_factory=list)
    groups: List[str] = field(default_factory=list)
    series: List[str] = field(default_factory=list)
    rows: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    filters: Dict[str, List[str]] = field(default_factory=dict)
    order_by: OrderBy = field(default_factory=dict)
    visualizations: List[str] = field(default_factory=list)

    source: Optional[str] = None
    target: Optional[str] = None

    def copy(self) -> 'QueryState':
        """Deep copy sharing no containers with this state."""
        return deepcopy(self)

    def update(self, values: Dict[str, Any]) -> None:
        """Assign known fields from a partial state (deep-copied). Unknown keys are ignored."""
        for name in _field_names():
            if name in values:
                setattr(self, name, deepcopy(values[name]))

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to a plain dictionary."""
        return {name: deepcopy(getattr(self, name)) for name in _field_names()}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'QueryState':
        """Create state instance from dictionary."""
        state = cls()
        if data:
            state.update(data)
        return state


def _field_names() -> List[str]:
    return [f.name for f in fields(QueryState)]


def get_default_state(**identifiers: Any) -> Dict[str, Any]:
    """
    Type-agnostic empty query as a partial state.

    Args:
        **identifiers: Extra fields to include (package_id, country_code, ...)

    Returns:
        Dictionary with every query field empty and lang set to the default
    """
    defaults = {
        'measures': [],
        'groups': [],
        'series': [],
        'rows': [],
        'columns': [],
        'filters': {},
        'order_by': {},
        'visualizations': [],
        'lang': DEFAULT_LANG,
    }
    defaults.update(identifiers)
    return defaults
