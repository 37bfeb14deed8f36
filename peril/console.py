"""Interactive console prompts and help text."""

from __future__ import annotations

import random
import sys

from peril.gamestate import GameError

PROMPT = "> "

MALICIOUS_LOGS = (
    "Never interrupt your enemy when he is making a mistake.",
    "The hardest thing of all for a soldier is to retreat.",
    "A soldier will fight long and hard for a bit of colored ribbon.",
    "It is well that war is so terrible, otherwise we should grow too fond of it.",
    "The art of war is simple enough. Find out where your enemy is. Get at him as "
    "soon as you can. Strike him as hard as you can, and keep moving on.",
    "All warfare is based on deception.",
)

_CLIENT_HELP = (
    "Possible commands:",
    "* move <location> <unitID> <unitID> <unitID>...",
    "    example:",
    "    move asia 1",
    "* spawn <location> <rank>",
    "    example:",
    "    spawn europe infantry",
    "* status",
    "* spam <n>",
    "    example:",
    "    spam 5",
    "* quit",
    "* help",
)

_SERVER_HELP = (
    "Possible commands:",
    "* pause",
    "* resume",
    "* quit",
    "* help",
)

_QUIT_MESSAGE = "I hate this game! (╯°□°)╯︵ ┻━┻"


def _write_lines(lines: tuple[str, ...]) -> str:
    """Write the lines to standard output and return the text written."""
    text = "".join(f"{line}\n" for line in lines)
    sys.stdout.write(text)
    return text


def print_client_help() -> str:
    """Show the client commands and return the text shown."""
    return _write_lines(_CLIENT_HELP)


def client_welcome() -> str:
    """Greet the player and return the username they enter."""
    print("Welcome to the Peril client!")
    print("Please enter your username:")
    words = get_input()
    if not words:
        raise GameError("you must enter a username. goodbye")
    username = words[0]
    print(f"Welcome, {username}!")
    print_client_help()
    return username


def print_server_help() -> str:
    """Show the server commands and return the text shown."""
    return _write_lines(_SERVER_HELP)


def get_input() -> list[str]:
    """Prompt and return the words of one input line; empty at end of input."""
    sys.stdout.write(PROMPT)
    sys.stdout.flush()
    return sys.stdin.readline().split()


def get_malicious_log() -> str:
    return random.choice(MALICIOUS_LOGS)


def print_quit() -> str:
    """Show the quit message and return it."""
    return _write_lines((_QUIT_MESSAGE,))