"""The Game board: terrain grid plus the units standing on it. Immutable, every update returns a new Board."""

from dataclasses import dataclass, replace
from typing import Optional, Self

from archess.core.shared_types import TileType
from archess.engine.position import Position
from archess.engine.units import Unit

TileGrid = tuple[tuple[TileType, ...], ...]


def empty_tiles(width: int, height: int) -> TileGrid:
    return tuple(tuple(TileType.EMPTY for _ in range(width)) for _ in range(height))


@dataclass(frozen=True)
class Board:
    width: int
    height: int
    tiles: TileGrid  # indexed as tiles[y][x]
    units: tuple[Unit, ...]

    @classmethod
    def empty(cls, width: int, height: int) -> Self:
        return cls(width, height, empty_tiles(width, height), ())

    def tile(self, position: Position) -> TileType:
        return self.tiles[position.y][position.x]

    def is_within_bounds(self, position: Position) -> bool:
        return position.is_within_bounds(self.width, self.height)

    def is_wall(self, position: Position) -> bool:
        return self.tile(position) == TileType.WALL

    def unit(self, unit_id: str) -> Optional[Unit]:
        return next((unit for unit in self.units if unit.id == unit_id), None)

    def unit_at(self, position: Position) -> Optional[Unit]:
        return next((unit for unit in self.units if unit.position == position), None)

    def is_occupied(self, position: Position) -> bool:
        return self.unit_at(position) is not None

    def is_any_occupied(self, positions: list[Position]) -> bool:
        return any(self.is_occupied(position) for position in positions)

    def units_of(self, owner: str) -> list[Unit]:
        return [unit for unit in self.units if unit.owner == owner]

    # --- copy-on-write updates ---
    def place_unit(self, unit: Unit) -> Self:
        return replace(self, units=(*self.units, unit))

    def replace_unit(self, updated: Unit) -> Self:
        """Swap in a new version of a unit (same id). A defeated unit is dropped instead of kept at zero health."""
        if updated.is_defeated:
            return self.remove_unit(updated.id)
        return replace(
            self,
            units=tuple(updated if unit.id == updated.id else unit for unit in self.units),
        )

    def remove_unit(self, unit_id: str) -> Self:
        return replace(
            self, units=tuple(unit for unit in self.units if unit.id != unit_id)
        )

    def with_tile(self, position: Position, tile: TileType) -> Self:
        rows = [list(row) for row in self.tiles]
        rows[position.y][position.x] = tile
        return replace(self, tiles=tuple(tuple(row) for row in rows))
