from .eventerror import EventError

__all__ = ["EventError"]
