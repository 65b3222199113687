"""Framework-agnostic expense store and its derived views."""

from __future__ import annotations

from typing import (
    Callable,
    Dict,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypeVar,
    overload,
)

from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .logging_setup import get_logger
from .models import ExpenseItem, ViewMode
from .storage import KeyValueStorage, decode_items, encode_items

logger = get_logger("store")

DEFAULT_STORAGE_KEY = "Items"

T = TypeVar("T")


def grouped_first_by_key(records: Iterable[T], key_fn: Callable[[T], Hashable]) -> List[T]:
    """Pick one exemplar per distinct key: the first record seen with that key.

    Amounts are not aggregated. Keys come out in order of first appearance.
    """
    exemplars: Dict[Hashable, T] = {}
    for record in records:
        exemplars.setdefault(key_fn(record), record)
    return list(exemplars.values())


class ExpenseView(Sequence[ExpenseItem]):
    """Live, restartable view of the store filtered to one category.

    Nothing is copied up front; every iteration filters the store's current
    collection again.
    """

    def __init__(self, store: "ExpenseStore", category: Optional[str] = None) -> None:
        self._store = store
        self._category = category

    @property
    def category(self) -> Optional[str]:
        return self._category

    def __iter__(self) -> Iterator[ExpenseItem]:
        for item in self._store.items:
            if self._category is None or item.category == self._category:
                yield item

    def __len__(self) -> int:
        return sum(1 for _ in self)

    @overload
    def __getitem__(self, index: int) -> ExpenseItem:
        ...

    @overload
    def __getitem__(self, index: slice) -> List[ExpenseItem]:
        ...

    def __getitem__(self, index):
        return list(self)[index]

    def __repr__(self) -> str:
        return f"ExpenseView(category={self._category!r}, items={list(self)!r})"


class ExpenseStore:
    """Owns the ordered expense collection and persists it on every change."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._storage = storage
        self._key = key
        self._items: List[ExpenseItem] = []
        self.load()  # Hydrate in-memory collection from the slot on construction.

    # Public API -----------------------------------------------------------
    @property
    def items(self) -> Tuple[ExpenseItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ExpenseItem]:
        return iter(self.items)

    def load(self) -> List[ExpenseItem]:
        """Replace the collection with the persisted one.

        A missing, unreadable or undecodable slot all mean an empty collection.
        """
        try:
            raw = self._storage.load(self._key)
        except PersistenceError as exc:
            logger.warning("Could not read slot %r, starting empty: %s", self._key, exc)
            raw = None
        self._items = decode_items(raw)
        logger.debug("Loaded %d expenses from slot %r", len(self._items), self._key)
        return list(self._items)

    def add(self, item: ExpenseItem) -> ExpenseItem:
        """Append ``item`` and persist. Field values are stored as given."""
        if any(existing.id == item.id for existing in self._items):
            raise ValidationError(f"Expense {item.id} already exists")
        self._items.append(item)
        self._persist()
        return item

    def remove(self, positions: Iterable[int], mode: ViewMode = ViewMode.BOTH) -> List[ExpenseItem]:
        """Remove the records shown at ``positions`` of the list displayed under ``mode``.

        Positions are resolved to record ids against that view before anything
        is removed, so an active filter never shifts the target. Persists even
        when ``positions`` is empty.
        """
        displayed = list(self.view(mode))
        targets: List[ExpenseItem] = []
        for position in sorted(set(positions)):
            if position < 0 or position >= len(displayed):
                raise RecordNotFoundError(
                    f"No expense at position {position} in the {mode.title} list"
                )
            targets.append(displayed[position])
        self._discard({item.id for item in targets})
        self._persist()
        return targets

    def remove_ids(self, expense_ids: Iterable[str]) -> List[ExpenseItem]:
        """Remove records by id and persist; an unknown id raises before anything is removed."""
        wanted = list(dict.fromkeys(expense_ids))
        targets = [self._get_or_raise(expense_id) for expense_id in wanted]
        self._discard(set(wanted))
        self._persist()
        return targets

    def get(self, expense_id: str) -> ExpenseItem:
        """Return an expense or raise if it does not exist."""
        return self._get_or_raise(expense_id)

    def filtered_by(self, category: Optional[str] = None) -> ExpenseView:
        return ExpenseView(self, category)

    def view(self, mode: ViewMode) -> ExpenseView:
        return self.filtered_by(mode.category)

    def chart_items(self, mode: ViewMode) -> List[ExpenseItem]:
        """Exemplar records for the chart: one per name, or per category in the combined view."""
        return grouped_first_by_key(self.view(mode), mode.key_fn)

    @staticmethod
    def scope_label(mode: ViewMode) -> str:
        return mode.title

    # Internal helpers -----------------------------------------------------
    def _discard(self, expense_ids: Set[str]) -> None:
        self._items = [item for item in self._items if item.id not in expense_ids]
        logger.debug("Removed %d expenses", len(expense_ids))

    def _persist(self) -> None:
        # Fire-and-forget: a failed write is logged and the in-memory state stands.
        try:
            self._storage.save(self._key, encode_items(self._items))
        except PersistenceError as exc:
            logger.warning("Dropping write to slot %r: %s", self._key, exc)
        except (TypeError, ValueError) as exc:
            logger.warning("Could not encode expenses for slot %r: %s", self._key, exc)

    def _get_or_raise(self, expense_id: str) -> ExpenseItem:
        for item in self._items:
            if item.id == expense_id:
                return item
        raise RecordNotFoundError(f"Expense {expense_id} not found")
