"""
Query parameter export/import for the Explorer.

This module turns a query state back into the flat parameter bag the
normalizer reads (the URL representation), and saves/loads that bag
to/from TOML for sharing and persistence.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Tuple

import toml

from core import __version__
from core.exceptions import ValidationError
from explorer.state.models import AXES, QueryState
from explorer.state.normalizer import PAIR_SEPARATOR

logger = logging.getLogger(__name__)

FORMAT_VERSION = '1.0'

LIST_PARAMS = AXES + ('filters', 'visualizations')
SCALAR_PARAMS = ('measure', 'order', 'lang')


def state_to_url_params(state: QueryState) -> Dict[str, Any]:
    """
    Flatten a query state into URL parameters.

    Empty fields are omitted; 'lang' is always present. Filters become
    'key|value' entries, one per selected value.

    Args:
        state: Query state to serialize

    Returns:
        Parameter bag accepted by normalize_url_params/update_from_params
    """
    params: Dict[str, Any] = {}

    if state.measures:
        params['measure'] = state.measures[0]

    for axis in AXES:
        values = getattr(state, axis)
        if values:
            params[axis] = list(values)

    filters = [
        f"{key}{PAIR_SEPARATOR}{value}"
        for key, values in state.filters.items()
        for value in values
    ]
    if filters:
        params['filters'] = filters

    if state.order_by.get('key'):
        params['order'] = f"{state.order_by['key']}{PAIR_SEPARATOR}{state.order_by['direction']}"

    if state.visualizations:
        params['visualizations'] = list(state.visualizations)

    params['lang'] = state.lang
    return params


def export_query_parameters_to_toml(
    state: QueryState,
    user_notes: str = "",
    app_version: str = __version__
) -> str:
    """
    Export a query state to TOML format string.

    Args:
        state: Query state to export
        user_notes: User-provided notes
        app_version: Application version

    Returns:
        TOML format string
    """
    query_params = {
        'metadata': {
            'export_timestamp': datetime.now().isoformat(),
            'app_version': app_version,
            'format_version': FORMAT_VERSION,
            'user_notes': user_notes
        },
        'package': {
            'id': state.package_id or ''
        },
        'params': state_to_url_params(state)
    }
    return toml.dumps(query_params)


def _validate_params(params: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    errors = []
    validated = {}

    for key, value in params.items():
        if key in SCALAR_PARAMS:
            if isinstance(value, str):
                validated[key] = value
            else:
                errors.append(f"Parameter '{key}' must be a string")
        elif key in LIST_PARAMS:
            if isinstance(value, str):
                value = [value]
            if isinstance(value, list) and all(isinstance(item, str) for item in value):
                validated[key] = value
            else:
                errors.append(f"Parameter '{key}' must be a list of strings")
        else:
            errors.append(f"Unknown parameter: {key}")

    return validated, errors


def import_query_parameters_from_toml(toml_string: str) -> Tuple[Dict[str, Any], List[str]]:
    """
    Import and validate query parameters from TOML format string.

    Args:
        toml_string: TOML format string produced by export_query_parameters_to_toml

    Returns:
        Tuple of (parsed_data, error_messages). parsed_data holds 'metadata',
        'package_id' and 'params' (a bag for update_from_params).

    Raises:
        ValidationError: If TOML parsing fails
    """
    errors = []
    parsed_data = {}

    try:
        data = toml.loads(toml_string)
    except toml.TomlDecodeError as e:
        error_msg = f"Invalid TOML format: {e}"
        logger.error(error_msg)
        raise ValidationError(error_msg, field="toml_string")

    required_sections = ['metadata', 'params']
    for section in required_sections:
        if section not in data:
            errors.append(f"Missing required section: {section}")

    if errors:
        return parsed_data, errors

    metadata = data.get('metadata', {})
    parsed_data['metadata'] = {
        'export_timestamp': metadata.get('export_timestamp'),
        'app_version': metadata.get('app_version'),
        'format_version': metadata.get('format_version'),
        'user_notes': metadata.get('user_notes', '')
    }

    format_version = metadata.get('format_version')
    if format_version != FORMAT_VERSION:
        errors.append(f"Unsupported format version: {format_version}")

    parsed_data['package_id'] = data.get('package', {}).get('id') or None

    params = data['params']
    if not isinstance(params, dict):
        errors.append("Section 'params' must be a table")
        return parsed_data, errors

    parsed_data['params'], param_errors = _validate_params(params)
    errors.extend(param_errors)

    return parsed_data, errors
