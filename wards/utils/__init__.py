from .audit import log_action

__all__ = ["log_action"]
