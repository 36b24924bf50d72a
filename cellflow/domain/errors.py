class InvalidConfiguration(ValueError):
    """Raised at construction when a run cannot be built from its parameters."""


class InvariantViolation(RuntimeError):
    """Raised when the automaton reaches a state the model considers impossible."""
