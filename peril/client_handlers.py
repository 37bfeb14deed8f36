"""Message handlers used by the game client."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Any, Callable

from peril.gamedata import ArmyMove, RecognitionOfWar
from peril.gamestate import GameState, MoveOutcome, WarOutcome
from peril.pubsub import Acktype, PubSubError, publish_json, publish_msgpack
from peril.routing import (
    EXCHANGE_PERIL_TOPIC,
    GAME_LOG_SLUG,
    WAR_RECOGNITIONS_PREFIX,
    GameLog,
    PlayingState,
)

_PROMPT = "> "


def _prompt() -> int:
    """Show the input prompt again and return the number of characters written."""
    written = sys.stdout.write(_PROMPT)
    sys.stdout.flush()
    return written


def handler_move(state: GameState, publish_channel: Any) -> Callable[[ArmyMove], Acktype]:
    """Build a handler reacting to other players' army moves."""

    def handle(move: ArmyMove) -> Acktype:
        try:
            outcome = state.handle_move(move)
            if outcome in (MoveOutcome.SAME_PLAYER, MoveOutcome.SAFE):
                return Acktype.ACK
            if outcome == MoveOutcome.MAKE_WAR:
                war = RecognitionOfWar(
                    attacker=move.player, defender=state.player_snapshot()
                )
                try:
                    publish_json(
                        publish_channel,
                        EXCHANGE_PERIL_TOPIC,
                        f"{WAR_RECOGNITIONS_PREFIX}.{state.player.username}",
                        war,
                    )
                except PubSubError as exc:
                    print(f"error: {exc}")
                    return Acktype.NACK_REQUEUE
                return Acktype.ACK
            print("error: unknown move outcome")
            return Acktype.NACK_DISCARD
        finally:
            _prompt()

    return handle


def _publish_game_log(state: GameState, publish_channel: Any, message: str) -> Acktype:
    username = state.player.username
    log = GameLog(current_time=datetime.now().astimezone(), message=message, username=username)
    try:
        publish_msgpack(publish_channel, EXCHANGE_PERIL_TOPIC, f"{GAME_LOG_SLUG}.{username}", log)
    except PubSubError:
        return Acktype.NACK_REQUEUE
    return Acktype.ACK


def handler_war(
    state: GameState, publish_channel: Any
) -> Callable[[RecognitionOfWar], Acktype]:
    """Build a handler that fights declared wars and logs their results."""

    def handle(war: RecognitionOfWar) -> Acktype:
        try:
            outcome, winner, loser = state.handle_war(war)
            if outcome == WarOutcome.NOT_INVOLVED:
                return Acktype.NACK_REQUEUE
            if outcome == WarOutcome.NO_UNITS:
                return Acktype.NACK_DISCARD
            if outcome in (WarOutcome.OPPONENT_WON, WarOutcome.YOU_WON):
                return _publish_game_log(
                    state, publish_channel, f"{winner} won a war against {loser}"
                )
            if outcome == WarOutcome.DRAW:
                return _publish_game_log(
                    state,
                    publish_channel,
                    f"A war between {winner} and {loser} resulted in a draw",
                )
            print("error: unknown war outcome")
            return Acktype.NACK_DISCARD
        finally:
            _prompt()

    return handle


def handler_pause(state: GameState) -> Callable[[PlayingState], Acktype]:
    """Build a handler applying pause and resume broadcasts."""

    def handle(playing_state: PlayingState) -> Acktype:
        try:
            state.handle_pause(playing_state)
            return Acktype.ACK
        finally:
            _prompt()

    return handle