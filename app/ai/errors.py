from __future__ import annotations


class CompletionError(RuntimeError):
    """Base for failures of the completion service call."""

    def __init__(self, message: str, *, code: str = "completion_failed"):
        super().__init__(message)
        self.code = code


class MissingCredentialsError(CompletionError):
    def __init__(self, message: str):
        super().__init__(message, code="missing_credentials")


class UpstreamTimeoutError(CompletionError):
    retryable = True

    def __init__(self, message: str, *, timeout_s: float | None = None):
        super().__init__(message, code="upstream_timeout")
        self.timeout_s = timeout_s


class UpstreamServiceError(CompletionError):
    def __init__(self, message: str, *, status_code: int | None = None, unreachable: bool = False):
        super().__init__(message, code="upstream_error")
        self.status_code = status_code
        self.unreachable = unreachable
