# plant/errors.py
from __future__ import annotations


class PlantError(Exception):
    """Base class for errors raised by the mixing plant core."""


class ValidationError(PlantError, ValueError):
    """Unknown tank/valve id, command name, command arguments or alarm severity. Raised straight to the caller."""


class PreconditionError(PlantError):
    """A command was refused because the process is not in a state that allows it."""
