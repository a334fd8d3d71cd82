"""Request payload models for the matching API (validated with pydantic)."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class CreateGamePayload(BaseModel):
    preset: Optional[str] = None
    entities: Optional[List[Dict[str, Any]]] = None
    matchingPairs: Optional[List[Dict[str, Any]]] = None
    tripleMatches: Optional[List[Dict[str, Any]]] = None
    columns: Optional[int] = None
    theme: Optional[str] = None
    shuffle: Optional[str] = None
    seed: Optional[float] = Field(default=None, allow_inf_nan=False)
    filters: Dict[str, Optional[str]] = Field(default_factory=dict)
    allow_reselect_incorrect: Optional[bool] = None
    clear_incorrect_on_select: Optional[bool] = None
    sink_resolved: Optional[bool] = None
    column_labels: Optional[List[str]] = None

    class Config:
        extra = "ignore"

    @model_validator(mode='after')
    def check_catalog_source(self):
        inline = self.entities or self.matchingPairs or self.tripleMatches
        if not self.preset and not inline:
            raise ValueError('Provide a preset or an inline catalog')
        return self

    def config_overrides(self) -> Dict[str, Any]:
        """Only the game settings the caller actually sent."""
        names = ('theme', 'shuffle', 'seed', 'allow_reselect_incorrect',
                 'clear_incorrect_on_select', 'sink_resolved')
        overrides = {name: getattr(self, name) for name in names if getattr(self, name) is not None}
        if self.column_labels:
            overrides['column_labels'] = tuple(self.column_labels)
        return overrides


class SelectPayload(BaseModel):
    column: int
    entity_id: str

    @field_validator('entity_id', mode='before')
    @classmethod
    def coerce_entity_id(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class FilterPayload(BaseModel):
    filters: Dict[str, Optional[str]] = Field(default_factory=dict)
