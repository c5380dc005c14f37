"""Telegram bot handlers module."""

from .commands import CommandHandlers, Command, CommandKind, parse_command

__all__ = ["CommandHandlers", "Command", "CommandKind", "parse_command"]
