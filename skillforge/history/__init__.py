from skillforge.history.repository import (
    IHistoryBackend,
    InMemoryHistoryBackend,
    JsonFileHistoryBackend,
)
from skillforge.history.store import HistoryStore

__all__ = [
    "HistoryStore",
    "IHistoryBackend",
    "InMemoryHistoryBackend",
    "JsonFileHistoryBackend",
]
