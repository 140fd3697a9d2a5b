from .config import settings, setup_logging, Settings

__all__ = ["settings", "setup_logging", "Settings"]
