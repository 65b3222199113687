"""Core business logic package for the expense tracker."""

from .models import ExpenseItem, ViewMode
from .services import ExpenseStore, ExpenseView, grouped_first_by_key
from .storage import JSONStorage, KeyValueStorage, MemoryStorage, decode_items, encode_items
from .exceptions import PersistenceError, ValidationError, RecordNotFoundError

__all__ = [
    "ExpenseItem",
    "ViewMode",
    "ExpenseStore",
    "ExpenseView",
    "grouped_first_by_key",
    "JSONStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "decode_items",
    "encode_items",
    "PersistenceError",
    "ValidationError",
    "RecordNotFoundError",
]
