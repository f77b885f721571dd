"""
Visualization registry.

Resolves visualization ids to their type. The type decides which defaults a
query state receives and which axes are single-select.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class VisualizationType(str, Enum):
    DRILLDOWN = 'drilldown'
    SORTABLE_SERIES = 'sortable-series'
    TIME_SERIES = 'time-series'
    LOCATION = 'location'
    PIVOT_TABLE = 'pivot-table'


@dataclass(frozen=True)
class Visualization:
    id: str
    type: VisualizationType


DEFAULT_VISUALIZATIONS = [
    Visualization('Treemap', VisualizationType.DRILLDOWN),
    Visualization('PieChart', VisualizationType.DRILLDOWN),
    Visualization('BubbleTree', VisualizationType.DRILLDOWN),
    Visualization('BarChart', VisualizationType.SORTABLE_SERIES),
    Visualization('Table', VisualizationType.SORTABLE_SERIES),
    Visualization('Radar', VisualizationType.SORTABLE_SERIES),
    Visualization('LineChart', VisualizationType.TIME_SERIES),
    Visualization('Map', VisualizationType.LOCATION),
    Visualization('PivotTable', VisualizationType.PIVOT_TABLE),
]


class VisualizationRegistry:
    """Read-only lookup of visualizations by id."""

    def __init__(self, visualizations: Iterable[Visualization] = DEFAULT_VISUALIZATIONS):
        self._by_id: Dict[str, Visualization] = {item.id: item for item in visualizations}

    def get_visualization_by_id(self, visualization_id: Optional[str]) -> Optional[Visualization]:
        if visualization_id is None:
            return None
        return self._by_id.get(visualization_id)

    def get_visualizations_by_ids(self, visualization_ids: Optional[Iterable[str]]) -> List[Visualization]:
        """Resolve ids in order, dropping the ones that are not registered."""
        result = []
        for visualization_id in visualization_ids or []:
            visualization = self.get_visualization_by_id(visualization_id)
            if visualization is None:
                logger.debug(f"Ignoring unknown visualization: {visualization_id}")
                continue
            result.append(visualization)
        return result

    @classmethod
    def from_entries(cls, entries: Iterable[Dict[str, str]]) -> 'VisualizationRegistry':
        """
        Build a registry from configuration entries ({'id': ..., 'type': ...}).

        Raises:
            ConfigurationError: If an entry has no id or an unknown type
        """
        visualizations = []
        for entry in entries:
            visualization_id = entry.get('id')
            if not visualization_id:
                raise ConfigurationError("Visualization entry is missing 'id'", field='visualizations')
            try:
                visualization_type = VisualizationType(entry.get('type'))
            except ValueError:
                raise ConfigurationError(
                    f"Unknown visualization type '{entry.get('type')}' for '{visualization_id}'",
                    field='visualizations'
                )
            visualizations.append(Visualization(visualization_id, visualization_type))
        return cls(visualizations)


_registry: Optional[VisualizationRegistry] = None


def get_registry() -> VisualizationRegistry:
    """Get the process-wide registry, creating the built-in one on first use."""
    global _registry
    if _registry is None:
        _registry = VisualizationRegistry()
    return _registry


def set_registry(registry: Optional[VisualizationRegistry]) -> None:
    """Install a registry for later calls; None restores the built-in one."""
    global _registry
    _registry = registry
