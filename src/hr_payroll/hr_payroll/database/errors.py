class PersistenceError(Exception):
    """Base class for storage-level failures surfaced to services."""


class DuplicateKeyError(PersistenceError):
    """A unique key (e.g. one attendance row per employee per day) was violated."""
