class ProviderError(RuntimeError):
    """Raised when the underlying LLM provider fails"""


class GenerationUnavailableError(ProviderError):
    """Raised when every configured LLM provider failed or none is configured.

    Callers are expected to fall back to deterministic essay generation
    rather than surface this to the user.
    """

    def __init__(self, message: str = "No LLM provider produced a response", attempts=None):
        super().__init__(message)
        self.attempts = list(attempts or [])
