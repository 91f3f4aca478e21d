"""Exception types raised by neurodrive.

Every error is fatal to the operation that raised it; nothing in the package
retries. The specific classes also derive from ValueError.
"""


class NeurodriveError(Exception):
    """Base class for all neurodrive errors."""


class ConfigurationError(NeurodriveError, ValueError):
    """Invalid construction arguments (missing evaluator, non-positive sizes)."""


class NetworkFormatError(NeurodriveError, ValueError):
    """Malformed serialized network text."""


class InputSizeError(NeurodriveError, ValueError):
    """Input vector length does not match a layer's input count."""


class InsufficientPopulationError(NeurodriveError, ValueError):
    """A population too small to breed from (fewer than 2 chromosomes)."""
