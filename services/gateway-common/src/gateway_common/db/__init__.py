"""Store access shared by the gateway services."""

from .store import RecordStore

__all__ = ['RecordStore']
