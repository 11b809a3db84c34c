"""Repository error taxonomy.

Read failures never surface as exceptions (they degrade to empty
results); these cover write paths and caller mistakes.
"""


class RepositoryError(Exception):
    """Base exception for repository operations."""

    pass


class CommitFailedError(RepositoryError):
    """Raised when a durable commit fails on a write path.

    The in-memory and durable states can no longer be trusted to agree,
    so the hosting process is expected to log this and terminate.
    """

    def __init__(self, action: str, entity_id: str, cause: Exception) -> None:
        super().__init__(f"Commit failed during {action} of {entity_id}: {cause}")
        self.action = action
        self.entity_id = entity_id


class EntityNotFoundError(RepositoryError):
    """Raised when a write references an id absent from the store."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} {entity_id} not found")
        self.kind = kind
        self.entity_id = entity_id


class UnsupportedFilterError(RepositoryError):
    """Raised when a filter criterion does not apply to the entity type."""

    pass


class SeedLoadError(Exception):
    """Raised when the seed dataset cannot be read or decoded."""

    pass
