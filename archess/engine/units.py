"""Defines the types of units and their combat stats"""

from dataclasses import dataclass, replace
from typing import Self
from uuid import uuid4

from archess.core.shared_types import UnitType
from archess.engine.position import Position


@dataclass(frozen=True)
class UnitStats:
    max_health: int
    attack: int
    defense: int
    movement: int


UNIT_STATS: dict[UnitType, UnitStats] = {
    UnitType.CHAMPION: UnitStats(max_health=100, attack=10, defense=5, movement=1),
    UnitType.SCOUT: UnitStats(max_health=60, attack=7, defense=3, movement=3),
    UnitType.DEFENDER: UnitStats(max_health=80, attack=6, defense=9, movement=1),
    UnitType.MAGE: UnitStats(max_health=70, attack=12, defense=4, movement=2),
}

# Fixed roster, ordered the way units are lined up on the owner's home row
ROSTER: tuple[UnitType, ...] = (
    UnitType.CHAMPION,
    UnitType.SCOUT,
    UnitType.DEFENDER,
    UnitType.MAGE,
)


def new_unit_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Unit:
    id: str
    type: UnitType
    owner: str
    position: Position
    health: int
    max_health: int
    attack: int
    defense: int
    movement: int

    @classmethod
    def recruit(cls, unit_type: UnitType, owner: str, position: Position) -> Self:
        """A fresh, full-health unit of the given kind."""
        stats = UNIT_STATS[unit_type]
        return cls(
            id=new_unit_id(),
            type=unit_type,
            owner=owner,
            position=position,
            health=stats.max_health,
            max_health=stats.max_health,
            attack=stats.attack,
            defense=stats.defense,
            movement=stats.movement,
        )

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def moved_to(self, position: Position) -> Self:
        return replace(self, position=position)

    def with_health(self, health: int) -> Self:
        """Health always stays within [0, max_health]."""
        return replace(self, health=max(0, min(health, self.max_health)))
