"""Application error types."""


class EstimationError(RuntimeError):
    """Remote estimation returned an error or unusable data."""


class PersistenceError(RuntimeError):
    """A write to the persistence backend failed and was rolled back locally."""
