from abc import ABC, abstractmethod
from typing import Any, Optional


class Provider(ABC):
    """
    Abstract base class for text-generation providers.

    A provider turns a prompt (plus an optional system instruction) into text.
    Implementations wrap their library errors in ProviderError.
    """

    name: str = "provider"

    @abstractmethod
    async def __call__(self, prompt: str, system: Optional[str] = None, **generation_args: Any) -> str: ...
