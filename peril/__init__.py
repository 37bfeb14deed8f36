"""Game state, console helpers, message routing, AMQP pub/sub and handlers for Peril."""

__version__ = "0.1.0"

__all__ = [
    "client_handlers",
    "console",
    "gamedata",
    "gamestate",
    "logs",
    "pubsub",
    "routing",
    "server_handlers",
]