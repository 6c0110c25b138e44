from .telegram import TelegramChannel, is_configured

__all__ = ["TelegramChannel", "is_configured"]
