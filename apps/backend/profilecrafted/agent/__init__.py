from .manager import AgentManager, ProviderConfig
from .exceptions import ProviderError, GenerationUnavailableError

__all__ = [
    "AgentManager",
    "ProviderConfig",
    "ProviderError",
    "GenerationUnavailableError",
]
