class ValidationError(Exception):
    """Raised when client-supplied task data violates a field constraint."""


class NotFoundError(Exception):
    """Raised when a referenced todo id is not in the collection."""

    def __init__(self, todo_id: str) -> None:
        super().__init__(f"Todo '{todo_id}' was not found.")
        self.todo_id = todo_id


class StorageError(Exception):
    """Raised when the backing JSON document cannot be read or written."""


class StorageReadError(StorageError):
    """The document is missing, unreadable, or not a valid task array."""


class StorageWriteError(StorageError):
    """Writing the document failed."""
