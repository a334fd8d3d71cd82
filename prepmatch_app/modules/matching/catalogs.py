# File: prepmatch_app/modules/matching/catalogs.py
"""
Built-in preset catalogs.

Topic data is plain configuration; each preset names its column labels
and the celebration theme of its game.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .schemas import Entity, GameConfig


@dataclass(frozen=True)
class Preset:
    key: str
    title: str
    theme: str
    column_labels: Tuple[str, ...]
    entities: Tuple[Entity, ...]

    @property
    def column_count(self) -> int:
        return len(self.column_labels)

    def build_config(self, **overrides) -> GameConfig:
        overrides.setdefault('theme', self.theme)
        overrides.setdefault('column_labels', self.column_labels)
        return GameConfig.for_columns(self.column_count, **overrides)


def _pair(id, left, right, category):
    return Entity(id=id, column_values=(left, right), category=category)


def _ruler(id, ruler, reign_start, religion, dynasty, era):
    return Entity(
        id=id,
        column_values=(ruler, reign_start, religion),
        attributes={'dynasty': dynasty, 'era': era},
    )


def _country(id, country, capital, patron_saint, region):
    return Entity(id=id, column_values=(country, capital, patron_saint), category='Country', region=region)


UK_FACTS = Preset(
    key='uk-facts',
    title='UK Facts',
    theme='general',
    column_labels=('Term', 'Meaning'),
    entities=(
        _pair('1', '1066', 'Norman Conquest', 'History'),
        _pair('2', '1215', 'Magna Carta signed', 'History'),
        _pair('3', '1314', 'Battle of Bannockburn', 'History'),
        _pair('4', 'London', 'Capital of England', 'Geography'),
        _pair('5', 'Edinburgh', 'Capital of Scotland', 'Geography'),
        _pair('6', 'Cardiff', 'Capital of Wales', 'Geography'),
        _pair('7', 'House of Commons', 'Lower house of Parliament', 'Government'),
        _pair('8', 'House of Lords', 'Upper house of Parliament', 'Government'),
        _pair('9', 'Shakespeare', 'Famous English playwright', 'Culture'),
        _pair('10', 'Burns Night', 'Scottish celebration on January 25th', 'Culture'),
    ),
)

RULERS_RELIGIONS = Preset(
    key='rulers-religions',
    title='Rulers & Religions',
    theme='royal',
    column_labels=('Ruler', 'Reign began', 'Religion'),
    entities=(
        _ruler('1', 'William the Conqueror', '1066', 'Roman Catholic', 'Norman', 'Medieval'),
        _ruler('2', 'Henry II', '1154', 'Roman Catholic', 'Plantagenet', 'Medieval'),
        _ruler('4', 'John', '1199', 'Roman Catholic', 'Plantagenet', 'Medieval'),
        _ruler('8', 'Henry VIII', '1509', 'Anglican (Church of England)', 'Tudor', 'Early Modern'),
        _ruler('9', 'Mary I (Bloody Mary)', '1553', 'Roman Catholic', 'Tudor', 'Early Modern'),
        _ruler('10', 'Elizabeth I', '1558', 'Anglican (Church of England)', 'Tudor', 'Early Modern'),
        _ruler('11', 'James I (VI of Scotland)', '1603', 'Anglican (Church of England)', 'Stuart', 'Early Modern'),
        _ruler('14', 'James II', '1685', 'Roman Catholic', 'Stuart', 'Early Modern'),
        _ruler('15', 'George I', '1714', 'Anglican (Church of England)', 'Hanover', 'Modern'),
        _ruler('17', 'Victoria', '1837', 'Anglican (Church of England)', 'Hanover', 'Modern'),
    ),
)

CONSTITUENT_COUNTRIES = Preset(
    key='constituent-countries',
    title='UK Constituent Countries',
    theme='uk',
    column_labels=('Country', 'Capital', 'Patron saint'),
    entities=(
        _country('1', 'England', 'London', 'St. George', 'Great Britain'),
        _country('2', 'Scotland', 'Edinburgh', 'St. Andrew', 'Great Britain'),
        _country('3', 'Wales', 'Cardiff', 'St. David', 'Great Britain'),
        _country('4', 'Northern Ireland', 'Belfast', 'St. Patrick', 'Ireland'),
    ),
)

PRESETS: Dict[str, Preset] = {
    preset.key: preset for preset in (UK_FACTS, RULERS_RELIGIONS, CONSTITUENT_COUNTRIES)
}


def get_preset(key: str) -> Optional[Preset]:
    return PRESETS.get(key)


def list_presets() -> List[Preset]:
    return list(PRESETS.values())
