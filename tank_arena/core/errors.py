"""Exception hierarchy for the battle engine."""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by the engine."""


class NotInitializedError(SimulationError):
    """An operation needs a sized battlefield but none was configured."""


class NoFreeSlotError(SimulationError):
    """Every start slot on the battlefield is already taken."""


class AiError(SimulationError):
    """An external decision source misbehaved."""


class AiActivationError(AiError):
    """Setting up a decision source failed."""


class AiStepError(AiError):
    """A decision source failed while producing its per-tick decision."""


class AiStateError(AiError):
    """An AI handle was used in a state that does not allow the operation."""


__all__ = [
    "AiActivationError",
    "AiError",
    "AiStateError",
    "AiStepError",
    "NoFreeSlotError",
    "NotInitializedError",
    "SimulationError",
]
