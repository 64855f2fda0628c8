"""Engine errors surfaced to callers."""


class StaleWriteError(RuntimeError):
    """A conditional update kept losing its race after all retries."""

    def __init__(self, entity: str, key: int, attempts: int):
        self.entity = entity
        self.key = key
        self.attempts = attempts
        super().__init__(
            f"{entity} {key}: conditional update lost {attempts} times in a row"
        )
