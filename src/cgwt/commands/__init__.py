"""Subcommands of the ``cgwt`` CLI; each module exposes ``register``."""

from __future__ import annotations

from . import compare, killall, launch, layouts, listing, new, status, switch, sync

COMMANDS = (listing, switch, launch, new, status, killall, compare, sync, layouts)

__all__ = ["COMMANDS"]
