from familyhub.config.settings import settings

__all__ = ["settings"]
