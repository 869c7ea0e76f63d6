class InferenceError(RuntimeError):
    """Base class for failures talking to the text-generation endpoint."""


class TransportError(InferenceError):
    """A single attempt failed (timeout, connection error, non-2xx, bad body).

    Retried automatically by the client.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InferenceExhausted(InferenceError):
    """Every attempt failed. Carries the error from the final attempt."""

    def __init__(self, attempts: int, last_error: BaseException | None):
        super().__init__(f"Inference failed after {attempts} attempt(s): {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class DecodeFallback(ValueError):
    """Strict JSON decoding failed; heuristic extraction should run instead."""
