# peril

Building blocks for Peril, a turn-based strategy game. Players spawn armies,
move them between continents and go to war. They exchange messages through
an AMQP message broker such as RabbitMQ.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `peril.routing` holds the exchange names (`EXCHANGE_PERIL_DIRECT`,
  `EXCHANGE_PERIL_TOPIC`) and routing-key prefixes (`ARMY_MOVES_PREFIX`,
  `WAR_RECOGNITIONS_PREFIX`, `PAUSE_KEY`, `GAME_LOG_SLUG`). It also defines the
  `PlayingState` and `GameLog` messages, each with `to_dict` and `from_dict`.
- `peril.gamedata` describes the world. It defines `UnitRank`, `Unit`, `Player`,
  `ArmyMove` and `RecognitionOfWar`, each with `to_dict` and `from_dict`. It
  also provides `is_valid_location`, `overlapping_location` and
  `units_to_power_level`.
- `peril.gamestate` holds a player's `GameState`.
  - Commands typed by the player: `command_spawn` returns the new `Unit`,
    `command_move` returns an `ArmyMove`, and `command_status` prints the
    player's units.
  - Incoming events: `handle_move` returns a `MoveOutcome`, `handle_war`
    returns a `WarOutcome` with the winner and loser, and `handle_pause`
    changes the paused state.
  - A rejected command raises `GameError`.
- `peril.console` handles the console.
  - `get_input` prompts for one line and returns its words.
  - `client_welcome` asks for a username and raises `GameError` if none is
    given.
  - `print_client_help`, `print_server_help` and `print_quit` print text.
  - `get_malicious_log` returns a random war quote.
- `peril.logs` provides `write_log`. It waits one second, then appends a line
  of the form `<RFC 3339 time> <username>: <message>` to a file, which is
  `game.log` by default.
- `peril.pubsub` sends and receives messages with `pika`.
  - `publish_json` and `publish_msgpack` publish messages.
  - `subscribe_json` and `subscribe_msgpack` return the consuming channel.
    Messages reach the handler while that channel consumes, for example during
    `channel.start_consuming()`.
  - `declare_and_bind` declares a durable or transient queue
    (`SimpleQueueType`) whose dead-letter exchange is `peril_dlx`, and binds it
    to an exchange.
  - The `encode_*` and `decode_*` functions convert messages to and from bytes.
  - Failures raise `PubSubError`.
- `peril.client_handlers` provides `handler_move`, `handler_war` and
  `handler_pause`. `peril.server_handlers` provides `handler_logs`. Each builds
  a callable that returns an `Acktype` (`ACK`, `NACK_DISCARD`, `NACK_REQUEUE`),
  which tells the subscriber what to do with the message.

## Example

```python
from peril.gamestate import GameState

state = GameState("alice")
state.command_spawn(["spawn", "europe", "infantry"])
state.command_spawn(["spawn", "europe", "artillery"])
move = state.command_move(["move", "asia", "1"])
state.command_status()
```

## Rules

Units are placed on one of these continents: `americas`, `europe`, `africa`,
`asia`, `australia` or `antarctica`.

A unit's rank sets its power:

| Rank        | Power |
|-------------|-------|
| `infantry`  | 1     |
| `cavalry`   | 5     |
| `artillery` | 10    |

A player who receives a move is at war with the mover if both have units on
the same continent. The player then publishes a `RecognitionOfWar`.

`handle_war` fights that war only for the player named as its attacker. The
side with more power on the shared continent wins. If the local player loses,
their units on that continent are removed. In a draw, the local player's units
there are removed.

## What this package does not do

The package has no command-line client or server and no interactive game
loop. It does not open a broker connection itself. You pass in an open `pika`
connection or channel, and you drive consumption yourself.