"""Project error hierarchy."""


class MirageError(Exception):
    """Base error."""


class CredentialMissingError(MirageError):
    """Raised at startup when no API key can be resolved."""


class UpstreamError(MirageError):
    """A per-request failure while talking to the completion API.

    ``public_message`` is the short plain-text body returned to the caller
    with a 500; the exception message may carry more detail for the logs.
    """

    public_message = "Internal Server Error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.public_message)
        self.detail = detail


class RequestBuildError(UpstreamError):
    """Payload serialisation or outbound request construction failed."""

    public_message = "Failed to create request"


class UpstreamUnreachableError(UpstreamError):
    """Connection, TLS or timeout failure before a response arrived."""

    public_message = "Failed to call Claude API"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        if detail:
            self.public_message = f"{type(self).public_message}: {detail}"


class UpstreamReadError(UpstreamError):
    """The response started but its body could not be read."""

    public_message = "Failed to read response"
