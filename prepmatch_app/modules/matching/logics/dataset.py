"""
Dataset & Filter
================
Validates a catalog and narrows it down to the *active set* for the
current filter predicate.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import MatchingModuleDefaultConfig as Defaults
from ..exceptions import InvalidDatasetError
from ..schemas import Entity, FilterPredicate


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_catalog(catalog: Sequence[Entity], column_count: int) -> Tuple[Entity, ...]:
    """
    Check that every id is unique and every entity carries a value for
    each of the ``column_count`` columns.

    Raises:
        InvalidDatasetError: listing every duplicate id and every missing
            column value found (not just the first).
    """
    seen = set()
    duplicates: List[Any] = []
    missing: List[Dict[str, Any]] = []

    for entity in catalog:
        if entity.id in seen and entity.id not in duplicates:
            duplicates.append(entity.id)
        seen.add(entity.id)

        for column in range(column_count):
            if column >= len(entity.column_values) or _is_missing(entity.column_values[column]):
                missing.append({'id': entity.id, 'column': column})

    if duplicates or missing:
        raise InvalidDatasetError(
            f"Catalog rejected: {len(duplicates)} duplicate id(s), {len(missing)} missing value(s)",
            duplicate_ids=duplicates,
            missing_values=missing,
        )
    return tuple(catalog)


def is_unconstrained(value: Optional[str]) -> bool:
    return value is None or (isinstance(value, str) and value.lower() == Defaults.MATCHING_FILTER_ALL)


def normalize_predicate(predicate: Optional[FilterPredicate]) -> FilterPredicate:
    """Drop the fields that place no constraint ('all' / None)."""
    if not predicate:
        return {}
    return {name: value for name, value in predicate.items() if not is_unconstrained(value)}


def matches(entity: Entity, predicate: FilterPredicate) -> bool:
    return all(entity.field_value(name) == value for name, value in predicate.items())


def apply_filter(catalog: Iterable[Entity], predicate: Optional[FilterPredicate]) -> Tuple[Entity, ...]:
    """Active set: every catalog entity satisfying all predicate fields, catalog order kept."""
    constraints = normalize_predicate(predicate)
    return tuple(entity for entity in catalog if matches(entity, constraints))


def filter_fields(catalog: Iterable[Entity]) -> List[str]:
    """Fields the catalog can be filtered on, in first-seen order."""
    fields: List[str] = []
    for entity in catalog:
        if entity.category is not None and 'category' not in fields:
            fields.append('category')
        if entity.region is not None and 'region' not in fields:
            fields.append('region')
        for name in entity.attributes:
            if name not in fields:
                fields.append(name)
    return fields


def filter_options(catalog: Iterable[Entity], field_name: str) -> List[Any]:
    """Selector choices for a field: 'all' then distinct values in first-seen order."""
    options: List[Any] = [Defaults.MATCHING_FILTER_ALL]
    for entity in catalog:
        value = entity.field_value(field_name)
        if value is not None and value not in options:
            options.append(value)
    return options
