"""Domain-specific errors for capedit."""


class CapeditError(Exception):
    """Base error for capedit."""


class DocumentValidationError(CapeditError):
    """Raised when a capability or type document is malformed."""


class DocumentLoadError(CapeditError):
    """Raised when a document file cannot be read."""


class ConfigError(CapeditError):
    """Raised when the configuration file is invalid."""


class SelectionError(CapeditError):
    """Raised when a catalog index does not resolve to an entry."""


class TypeDefinitionError(CapeditError):
    """Base error for type definition edits."""


class GroupInUseError(TypeDefinitionError):
    """Raised when deleting a channel group that a channel still maps into."""


class ChannelNotFoundError(TypeDefinitionError):
    """Raised when no channel has the requested group-qualified id."""


class TransportError(CapeditError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the execute endpoint cannot be reached."""


class TransportTimeoutError(TransportError):
    """Raised when the execute endpoint does not answer in time."""


class TransportSendError(TransportError):
    """Raised when the execute endpoint answers with an HTTP error status."""

    def __init__(self, status: int, reason: str) -> None:
        self.status = status
        self.reason = reason
        super().__init__(f"{status} {reason}".strip())
