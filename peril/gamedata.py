"""Players, units and the messages that describe moves and wars."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping


class UnitRank(str, Enum):
    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"


LOCATIONS = frozenset(
    {"americas", "europe", "africa", "asia", "australia", "antarctica"}
)

_POWER = {
    UnitRank.ARTILLERY: 10,
    UnitRank.CAVALRY: 5,
    UnitRank.INFANTRY: 1,
}


@dataclass(frozen=True)
class Unit:
    id: int
    rank: UnitRank
    location: str

    def to_dict(self) -> dict[str, Any]:
        return {"ID": self.id, "Rank": self.rank.value, "Location": self.location}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Unit:
        return cls(
            id=int(data["ID"]),
            rank=UnitRank(data["Rank"]),
            location=str(data["Location"]),
        )


@dataclass
class Player:
    username: str
    units: dict[int, Unit] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Username": self.username,
            "Units": {str(key): unit.to_dict() for key, unit in self.units.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Player:
        units = data.get("Units") or {}
        return cls(
            username=str(data["Username"]),
            units={int(key): Unit.from_dict(value) for key, value in units.items()},
        )


@dataclass
class ArmyMove:
    player: Player
    units: list[Unit]
    to_location: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "Player": self.player.to_dict(),
            "Units": [unit.to_dict() for unit in self.units],
            "ToLocation": self.to_location,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ArmyMove:
        return cls(
            player=Player.from_dict(data["Player"]),
            units=[Unit.from_dict(item) for item in data.get("Units") or []],
            to_location=str(data["ToLocation"]),
        )


@dataclass
class RecognitionOfWar:
    attacker: Player
    defender: Player

    def to_dict(self) -> dict[str, Any]:
        return {"Attacker": self.attacker.to_dict(), "Defender": self.defender.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RecognitionOfWar:
        return cls(
            attacker=Player.from_dict(data["Attacker"]),
            defender=Player.from_dict(data["Defender"]),
        )


def is_valid_location(name: str) -> bool:
    """Return True if ``name`` is one of the map's locations."""
    return name in LOCATIONS


def overlapping_location(first: Player, second: Player) -> str | None:
    """Return the first location where both players have units, if any."""
    second_locations = {unit.location for unit in second.units.values()}
    return next(
        (unit.location for unit in first.units.values() if unit.location in second_locations),
        None,
    )


def units_to_power_level(units: Iterable[Unit]) -> int:
    """Sum the fighting power of the given units."""
    return sum(_POWER.get(unit.rank, 0) for unit in units)