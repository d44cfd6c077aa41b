"""Runtime configuration helpers."""

from tripchat.config.settings import ChatPolicy, Settings, load_chat_policy, load_settings

__all__ = ["ChatPolicy", "Settings", "load_chat_policy", "load_settings"]
