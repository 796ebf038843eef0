"""Exception types raised by the indexing and search engine."""


class DependencyContextError(Exception):
    """Base class for all dependency-context errors."""
    pass


class InvalidInput(DependencyContextError):
    """Raised when an operation receives nothing usable (no documents, bad bounds)."""
    pass


class EmbeddingFailure(DependencyContextError):
    """Raised when the embedding model cannot be loaded or run."""
    pass


class StorageReadFailure(DependencyContextError):
    pass


class StorageWriteFailure(DependencyContextError):
    pass


class NotIndexed(DependencyContextError):
    """No store exists yet for the project. Search treats this as an empty result."""

    def __init__(self, project_path: str):
        super().__init__(f"No index found for project: {project_path}")
        self.project_path = project_path
