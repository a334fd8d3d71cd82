"""
Catalog provider adapter.

Turns stored game records into ``Entity`` tuples. Three record shapes
are understood:

* generic: ``{"id", "values": [...], "category", "region", "attributes"}``
* pairs (``matchingPairs``): ``{"id", "left", "right", "category"}``
* triples (``tripleMatches``): ``{"id", "column1", "column2", "column3", "category"}``
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import InvalidDatasetError
from ..schemas import Entity


def _stringify(value):
    """Numbers in stored records (ids, years) are shown as text."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _RecordBase(BaseModel):
    id: str
    category: Optional[str] = None
    region: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, value):
        return _stringify(value)

    class Config:
        extra = "ignore"


class EntityRecord(_RecordBase):
    values: List[Optional[str]]

    @field_validator('values', mode='before')
    @classmethod
    def coerce_values(cls, value):
        if isinstance(value, (list, tuple)):
            return [_stringify(item) for item in value]
        return value

    def column_values(self) -> Tuple[Optional[str], ...]:
        return tuple(self.values)


class MatchingPairRecord(_RecordBase):
    left: Optional[str] = None
    right: Optional[str] = None

    @field_validator('left', 'right', mode='before')
    @classmethod
    def coerce_sides(cls, value):
        return _stringify(value)

    def column_values(self) -> Tuple[Optional[str], ...]:
        return (self.left, self.right)


class TripleMatchRecord(_RecordBase):
    column1: Optional[str] = None
    column2: Optional[str] = None
    column3: Optional[str] = None

    @field_validator('column1', 'column2', 'column3', mode='before')
    @classmethod
    def coerce_columns(cls, value):
        return _stringify(value)

    def column_values(self) -> Tuple[Optional[str], ...]:
        return (self.column1, self.column2, self.column3)


# payload key -> (record model, column count or None when taken from the records)
RECORD_KINDS = {
    'entities': (EntityRecord, None),
    'matchingPairs': (MatchingPairRecord, 2),
    'tripleMatches': (TripleMatchRecord, 3),
}


def _to_entity(record: _RecordBase) -> Entity:
    return Entity(
        id=record.id,
        column_values=record.column_values(),
        category=record.category,
        region=record.region,
        attributes=dict(record.attributes),
    )


def load_records(kind: str, records: Sequence[Mapping[str, Any]]) -> Tuple[Entity, ...]:
    """
    Validate raw records of one kind and convert them to entities.

    Raises:
        InvalidDatasetError: a record is malformed (pydantic error list in
            ``details['errors']``).
    """
    if kind not in RECORD_KINDS:
        raise InvalidDatasetError(f"Unknown catalog kind {kind!r}")
    model, _ = RECORD_KINDS[kind]
    entities = []
    for index, raw in enumerate(records):
        try:
            record = model.model_validate(raw)
        except ValidationError as exc:
            raise InvalidDatasetError(
                f"Catalog record #{index} is malformed",
                errors=exc.errors(include_url=False, include_context=False),
            ) from exc
        entities.append(_to_entity(record))
    return tuple(entities)


def load_catalog(payload: Mapping[str, Any]) -> Tuple[Tuple[Entity, ...], int]:
    """
    Pick the catalog out of a game payload.

    ``tripleMatches`` wins over ``matchingPairs`` when a stored game
    carries both; generic ``entities`` win over both.

    Returns:
        ``(entities, column_count)``.
    """
    for kind in ('entities', 'tripleMatches', 'matchingPairs'):
        records = payload.get(kind)
        if not records:
            continue
        entities = load_records(kind, records)
        _, column_count = RECORD_KINDS[kind]
        if column_count is None:
            column_count = payload.get('columns') or min(len(e.column_values) for e in entities)
        return entities, column_count
    raise InvalidDatasetError('Game payload carries no catalog (entities, matchingPairs or tripleMatches)')
