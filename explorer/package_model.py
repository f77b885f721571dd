"""
Package model: the read-only dataset schema the query state is built against.

A package exposes its measures and four hierarchy collections. ``hierarchies``
holds every hierarchy of the package; the date-time, location and column
collections are typed views over it used by per-visualization defaulting.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.exceptions import PackageModelError


DATETIME_DIMENSION_TYPE = 'datetime'


@dataclass
class Measure:
    """A numeric measure of the package."""
    key: str
    label: Optional[str] = None


@dataclass
class Dimension:
    """A dimension (attribute) that can be placed on an axis or filtered."""
    key: str
    dimension_type: Optional[str] = None
    values: Optional[List[Any]] = None
    label: Optional[str] = None

    @property
    def is_datetime(self) -> bool:
        return self.dimension_type == DATETIME_DIMENSION_TYPE


@dataclass
class Hierarchy:
    """Ordered sequence of dimensions forming a drill-down path."""
    dimensions: List[Dimension] = field(default_factory=list)
    key: Optional[str] = None
    label: Optional[str] = None

    def index_of(self, dimension_key: Optional[str]) -> int:
        """Position of the dimension with the given key, or -1."""
        for index, dimension in enumerate(self.dimensions):
            if dimension.key == dimension_key:
                return index
        return -1

    def contains(self, dimension_key: Optional[str]) -> bool:
        return self.index_of(dimension_key) >= 0


@dataclass
class PackageModel:
    """
    Dataset schema consumed by the query-state engine.

    Construction validates the preconditions the engine relies on and raises
    PackageModelError instead of producing a partially usable model.
    """

    id: str
    measures: List[Measure]
    hierarchies: List[Hierarchy]
    date_time_hierarchies: List[Hierarchy]
    location_hierarchies: List[Hierarchy] = field(default_factory=list)
    column_hierarchies: List[Hierarchy] = field(default_factory=list)
    country_code: Optional[str] = None

    def __post_init__(self):
        if not self.measures:
            raise PackageModelError("Package has no measures",
                                    package_id=self.id, collection='measures')
        if not self.hierarchies:
            raise PackageModelError("Package has no hierarchies",
                                    package_id=self.id, collection='hierarchies')

        collections = {
            'hierarchies': self.hierarchies,
            'date_time_hierarchies': self.date_time_hierarchies,
            'location_hierarchies': self.location_hierarchies,
            'column_hierarchies': self.column_hierarchies,
        }
        for name, hierarchies in collections.items():
            for hierarchy in hierarchies:
                if not hierarchy.dimensions:
                    raise PackageModelError("Hierarchy has no dimensions",
                                            package_id=self.id, collection=name)

        if not self.date_time_hierarchies:
            raise PackageModelError("Package has no date/time hierarchy",
                                    package_id=self.id, collection='date_time_hierarchies')

    @property
    def first_measure(self) -> Measure:
        return self.measures[0]

    def find_hierarchy(self, dimension_key: Optional[str]) -> Optional[Hierarchy]:
        """First hierarchy containing a dimension with the given key."""
        for hierarchy in self.hierarchies:
            if hierarchy.contains(dimension_key):
                return hierarchy
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PackageModel':
        """
        Build a package model from its reader representation.

        Accepts the camelCase keys of the external reader ('dateTimeHierarchies',
        'meta': {'countryCode': ...}, 'dimensionType') as well as snake_case.

        Raises:
            PackageModelError: If required collections are missing or empty
        """
        if not data:
            raise PackageModelError("Package model data is empty")

        meta = data.get('meta') or {}
        country_code = meta.get('countryCode', data.get('country_code'))

        return cls(
            id=data.get('id'),
            country_code=country_code,
            measures=[_measure_from_dict(item) for item in data.get('measures') or []],
            hierarchies=_hierarchies_from(data, 'hierarchies', 'hierarchies'),
            date_time_hierarchies=_hierarchies_from(data, 'dateTimeHierarchies', 'date_time_hierarchies'),
            location_hierarchies=_hierarchies_from(data, 'locationHierarchies', 'location_hierarchies'),
            column_hierarchies=_hierarchies_from(data, 'columnHierarchies', 'column_hierarchies'),
        )


def _measure_from_dict(data: Dict[str, Any]) -> Measure:
    return Measure(key=data['key'], label=data.get('label'))


def _dimension_from_dict(data: Dict[str, Any]) -> Dimension:
    return Dimension(
        key=data['key'],
        dimension_type=data.get('dimensionType', data.get('dimension_type')),
        values=data.get('values'),
        label=data.get('label'),
    )


def _hierarchies_from(data: Dict[str, Any], camel_key: str, snake_key: str) -> List[Hierarchy]:
    items = data.get(camel_key, data.get(snake_key)) or []
    return [
        Hierarchy(
            dimensions=[_dimension_from_dict(d) for d in item.get('dimensions') or []],
            key=item.get('key'),
            label=item.get('label'),
        )
        for item in items
    ]
