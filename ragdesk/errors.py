"""Exception hierarchy for the ragdesk client.

Backend failures (unreachable, rejected) are raised by the transport adapter
and converted into status messages by the state managers. Operation
rejections are raised before any I/O when a precondition does not hold.
"""


class RagDeskError(Exception):
    """Base class for all ragdesk errors."""


class BackendUnreachableError(RagDeskError):
    """Raised when the backend produced no response at all."""


class ServerRejectedError(RagDeskError):
    """Raised when the backend answered with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the backend.
        detail: The backend's ``detail`` message, surfaced verbatim.
    """

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class OperationRejectedError(RagDeskError):
    """Raised when an operation is refused locally, before any request."""


class EmptyMessageError(OperationRejectedError):
    pass


class ExchangeInProgressError(OperationRejectedError):
    pass


class NothingStagedError(OperationRejectedError):
    pass


class CommitInProgressError(OperationRejectedError):
    pass


class NoDocumentsError(OperationRejectedError):
    pass


class IngestInProgressError(OperationRejectedError):
    pass


class AccessDeniedError(OperationRejectedError):
    """Raised when a session that has not passed the gate asks for admin state."""
