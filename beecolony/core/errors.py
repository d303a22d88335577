class SwarmError(Exception):
    """Base class for optimizer errors. Fitness-function errors are never wrapped."""


class DimensionMismatch(SwarmError, ValueError):
    def __init__(self, expected: int, got: int):
        super().__init__(f"dimension mismatch: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class NotInitialized(SwarmError, RuntimeError):
    pass


class InvalidConfiguration(SwarmError, ValueError):
    pass
