"""Exceptions raised by the task portal."""


class PortalError(Exception):
    """Base class for task portal errors."""


class TaskDocumentError(PortalError):
    """A stored document could not be decoded into a Task."""

    def __init__(self, doc_id: str, reason: str) -> None:
        """Initialize with the offending document key and reason."""
        super().__init__(f"Invalid task document '{doc_id}': {reason}")
        self.doc_id = doc_id
        self.reason = reason


class SubscriptionError(PortalError):
    """A live subscription was terminated by a backend error."""
