"""
Normalization of external (URL) parameters into a partial query state.

The raw bag comes from a query string: any field may be missing, a scalar
or a list. Normalization only reshapes; validation against the package and
the visualization registry happens in validator.py.
"""

import logging
from typing import Any, Dict, List, Optional

from explorer.package_model import PackageModel
from .models import AXES, DEFAULT_LANG, ORDER_ASC, ORDER_DESC, PartialState

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = '|'


def normalize_order_direction(direction: Any) -> str:
    """Coerce a direction to 'desc' or 'asc'; anything but 'desc' is 'asc'."""
    return ORDER_DESC if str(direction).lower() == ORDER_DESC else ORDER_ASC


def as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _split_pair(value: Any) -> Optional[List[str]]:
    parts = str(value).split(PAIR_SEPARATOR)
    if len(parts) == 2:
        return parts
    logger.debug(f"Dropping malformed parameter entry: {value!r}")
    return None


def _normalize_filters(filters: Any) -> Dict[str, Any]:
    if isinstance(filters, dict):
        return dict(filters)

    # Duplicate keys overwrite: the last 'key|value' entry wins
    result = {}
    for entry in as_list(filters):
        pair = _split_pair(entry)
        if pair:
            result[pair[0]] = pair[1]
    return result


def normalize_url_params(params: Optional[Dict[str, Any]],
                         package_model: Optional[PackageModel] = None,
                         default_lang: str = DEFAULT_LANG) -> PartialState:
    """
    Convert a raw parameter bag into a canonical partial state.

    Args:
        params: Raw parameters ('measure', axes, 'filters', 'order',
            'visualizations', 'lang')
        package_model: Accepted for symmetry with validate_url_params; unused
        default_lang: Language used when 'lang' is missing

    Returns:
        Partial state; 'visualizations' and 'lang' are always present
    """
    params = params or {}
    result: PartialState = {}

    if params.get('measure'):
        result['measures'] = [params['measure']]

    for axis in AXES:
        if params.get(axis):
            result[axis] = [item for item in as_list(params[axis]) if item]

    if params.get('filters'):
        result['filters'] = _normalize_filters(params['filters'])

    if params.get('order'):
        order = _split_pair(params['order'])
        if order:
            result['order_by'] = {
                'key': order[0],
                'direction': normalize_order_direction(order[1]),
            }

    result['visualizations'] = []
    if params.get('visualizations'):
        result['visualizations'] = [item for item in as_list(params['visualizations']) if item]

    result['lang'] = params.get('lang') or default_lang

    return result


def coerce_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Bring filters into state shape: every value a list, empty entries dropped.

    Scalars become one-element lists. New lists are built, so the result
    shares no container with the input.
    """
    result = {}
    for key, values in (filters or {}).items():
        values = [value for value in as_list(values) if value]
        if values:
            result[key] = values
    return result
