"""The local player's game state and the commands that change it."""

from __future__ import annotations

import re
import threading
from dataclasses import replace
from enum import IntEnum
from typing import Sequence

from peril.gamedata import (
    ArmyMove,
    Player,
    RecognitionOfWar,
    Unit,
    UnitRank,
    is_valid_location,
    overlapping_location,
    units_to_power_level,
)
from peril.routing import PlayingState

_SEPARATOR = "------------------------"
_UNIT_ID = re.compile(r"[+-]?[0-9]+")


class GameError(Exception):
    """A command could not be carried out."""


class MoveOutcome(IntEnum):
    SAME_PLAYER = 0
    SAFE = 1
    MAKE_WAR = 2


class WarOutcome(IntEnum):
    NOT_INVOLVED = 0
    NO_UNITS = 1
    YOU_WON = 2
    OPPONENT_WON = 3
    DRAW = 4


def _parse_unit_id(word: str) -> int:
    if not _UNIT_ID.fullmatch(word):
        raise GameError(f"error: {word} is not a valid unit ID")
    return int(word)


class GameState:
    """The local player, their units and whether the game is paused."""

    def __init__(self, username: str) -> None:
        self.player = Player(username=username)
        self.paused = False
        self._lock = threading.RLock()

    def _set_paused(self, paused: bool) -> None:
        with self._lock:
            self.paused = paused

    def _is_paused(self) -> bool:
        with self._lock:
            return self.paused

    def _remove_units_in_location(self, location: str) -> None:
        with self._lock:
            self.player.units = {
                key: unit
                for key, unit in self.player.units.items()
                if unit.location != location
            }

    def update_unit(self, unit: Unit) -> None:
        with self._lock:
            self.player.units[unit.id] = unit

    def get_unit(self, unit_id: int) -> Unit | None:
        with self._lock:
            return self.player.units.get(unit_id)

    def player_snapshot(self) -> Player:
        """Return a copy of the player that later changes do not affect."""
        with self._lock:
            return Player(username=self.player.username, units=dict(self.player.units))

    def handle_move(self, move: ArmyMove) -> MoveOutcome:
        try:
            player = self.player_snapshot()
            print()
            print("==== Move Detected ====")
            print(
                f"{move.player.username} is moving {len(move.units)} unit(s) "
                f"to {move.to_location}"
            )
            for unit in move.units:
                print(f"* {unit.rank.value}")

            if player.username == move.player.username:
                return MoveOutcome.SAME_PLAYER

            location = overlapping_location(player, move.player)
            if location is not None:
                print(
                    f"You have units in {location}! "
                    f"You are at war with {move.player.username}!"
                )
                return MoveOutcome.MAKE_WAR
            print(f"You are safe from {move.player.username}'s units.")
            return MoveOutcome.SAFE
        finally:
            print(_SEPARATOR)

    def command_move(self, words: Sequence[str]) -> ArmyMove:
        if self._is_paused():
            raise GameError("the game is paused, you can not move units")
        if len(words) < 3:
            raise GameError("usage: move <location> <unitID> <unitID> <unitID> etc")
        _, location, *raw_ids = words
        if not is_valid_location(location):
            raise GameError(f"error: {location} is not a valid location")
        unit_ids = [_parse_unit_id(word) for word in raw_ids]

        moved = []
        for unit_id in unit_ids:
            unit = self.get_unit(unit_id)
            if unit is None:
                raise GameError(f"error: unit with ID {unit_id} not found")
            unit = replace(unit, location=location)
            self.update_unit(unit)
            moved.append(unit)

        move = ArmyMove(player=self.player_snapshot(), units=moved, to_location=location)
        print(f"Moved {len(move.units)} units to {move.to_location}")
        return move

    def handle_pause(self, state: PlayingState) -> None:
        try:
            print()
            if state.is_paused:
                print("==== Pause Detected ====")
                self._set_paused(True)
            else:
                print("==== Resume Detected ====")
                self._set_paused(False)
        finally:
            print(_SEPARATOR)

    def command_spawn(self, words: Sequence[str]) -> Unit:
        if len(words) < 3:
            raise GameError("usage: spawn <location> <rank>")
        location, rank_name = words[1], words[2]
        if not is_valid_location(location):
            raise GameError(f"error: {location} is not a valid location")
        try:
            rank = UnitRank(rank_name)
        except ValueError:
            raise GameError(f"error: {rank_name} is not a valid unit") from None

        with self._lock:
            unit = Unit(id=len(self.player.units) + 1, rank=rank, location=location)
            self.player.units[unit.id] = unit
        print(f"Spawned a(n) {rank_name} in {location} with id {unit.id}")
        return unit

    def handle_war(self, war: RecognitionOfWar) -> tuple[WarOutcome, str, str]:
        """Fight a declared war; return the outcome, the winner and the loser."""
        try:
            return self._fight(war)
        finally:
            print(_SEPARATOR)

    def _fight(self, war: RecognitionOfWar) -> tuple[WarOutcome, str, str]:
        attacker, defender = war.attacker, war.defender
        print()
        print("==== War Declared ====")
        print(f"{attacker.username} has declared war on {defender.username}!")

        player = self.player_snapshot()
        if player.username == defender.username:
            print(f"{player.username}, you published the war.")
            return WarOutcome.NOT_INVOLVED, "", ""
        if player.username != attacker.username:
            print(f"{player.username}, you are not involved in this war.")
            return WarOutcome.NOT_INVOLVED, "", ""

        location = overlapping_location(attacker, defender)
        if location is None:
            print("Error! No units are in the same location. No war will be fought.")
            return WarOutcome.NO_UNITS, "", ""

        attacker_units = [u for u in attacker.units.values() if u.location == location]
        defender_units = [u for u in defender.units.values() if u.location == location]

        print(f"{attacker.username}'s units:")
        for unit in attacker_units:
            print(f"  * {unit.rank.value}")
        print(f"{defender.username}'s units:")
        for unit in defender_units:
            print(f"  * {unit.rank.value}")

        attacker_power = units_to_power_level(attacker_units)
        defender_power = units_to_power_level(defender_units)
        print(f"Attacker has a power level of {attacker_power}")
        print(f"Defender has a power level of {defender_power}")

        if attacker_power > defender_power:
            print(f"{attacker.username} has won the war!")
            if player.username == defender.username:
                self._lose(location)
                return WarOutcome.OPPONENT_WON, attacker.username, defender.username
            return WarOutcome.YOU_WON, attacker.username, defender.username
        if defender_power > attacker_power:
            print(f"{defender.username} has won the war!")
            if player.username == attacker.username:
                self._lose(location)
                return WarOutcome.OPPONENT_WON, defender.username, attacker.username
            return WarOutcome.YOU_WON, defender.username, attacker.username

        print("The war ended in a draw!")
        print(f"Your units in {location} have been killed.")
        self._remove_units_in_location(location)
        return WarOutcome.DRAW, attacker.username, defender.username

    def _lose(self, location: str) -> None:
        print("You have lost the war!")
        self._remove_units_in_location(location)
        print(f"Your units in {location} have been killed.")

    def command_status(self) -> None:
        if self._is_paused():
            print("The game is paused.")
            return
        print("The game is not paused.")
        player = self.player_snapshot()
        print(f"You are {player.username}, and you have {len(player.units)} units.")
        for unit in player.units.values():
            print(f"* {unit.id}: {unit.location}, {unit.rank.value}")