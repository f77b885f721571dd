"""
Shared fixtures for the Explorer test suite.
"""

import logging
import os
import sys
from copy import deepcopy

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.logging_config import ENGINE_LOGGERS
from explorer.package_model import PackageModel
from explorer.visualizations import VisualizationRegistry, set_registry


GEO_HIERARCHY = {
    'key': 'geo',
    'dimensions': [
        {'key': 'region', 'dimensionType': 'location'},
        {'key': 'country', 'dimensionType': 'location'},
        {'key': 'city', 'dimensionType': 'location'},
    ]
}

TIME_HIERARCHY = {
    'key': 'time',
    'dimensions': [
        {'key': 'year', 'dimensionType': 'datetime', 'values': ['2019', '2020', '2021']},
        {'key': 'month', 'dimensionType': 'datetime'},
    ]
}

ORG_HIERARCHY = {
    'key': 'org',
    'dimensions': [
        {'key': 'ministry', 'dimensionType': 'administrative'},
    ]
}

PACKAGE_DATA = {
    'id': 'budget-2020',
    'meta': {'countryCode': 'DE'},
    'measures': [{'key': 'amount'}, {'key': 'revenue'}],
    'hierarchies': [GEO_HIERARCHY, TIME_HIERARCHY, ORG_HIERARCHY],
    'dateTimeHierarchies': [TIME_HIERARCHY],
    'locationHierarchies': [GEO_HIERARCHY],
    'columnHierarchies': [ORG_HIERARCHY, TIME_HIERARCHY],
}


@pytest.fixture
def package_data():
    """Raw package model data as the package reader supplies it."""
    return deepcopy(PACKAGE_DATA)


@pytest.fixture
def package_model(package_data):
    """Package with a region > country > city hierarchy."""
    return PackageModel.from_dict(package_data)


@pytest.fixture
def registry():
    """Built-in visualization registry."""
    return VisualizationRegistry()


@pytest.fixture(autouse=True)
def reset_registry():
    """Restore the built-in process-wide registry after each test."""
    yield
    set_registry(None)


@pytest.fixture
def engine_logging():
    """Restore the engine loggers after a test that configures logging."""
    saved = {}
    for name in ENGINE_LOGGERS:
        engine_logger = logging.getLogger(name)
        saved[name] = (engine_logger.handlers[:], engine_logger.level, engine_logger.propagate)
    yield
    for name, (handlers, level, propagate) in saved.items():
        engine_logger = logging.getLogger(name)
        for handler in engine_logger.handlers[:]:
            if handler not in handlers:
                engine_logger.removeHandler(handler)
                handler.close()
        engine_logger.setLevel(level)
        engine_logger.propagate = propagate
