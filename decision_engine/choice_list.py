"""
Decision Engine - Choice List.

============================================================
RESPONSIBILITY
============================================================
Holds the ordered candidate options for a decision.

- Trims input and drops blank entries silently
- Removes by position, tolerating stale indices
- Notifies observers after every applied mutation

============================================================
INVARIANTS
============================================================
- Every stored option is non-empty after trimming
- Order is insertion order; removal shifts later entries down
- Readers only ever get immutable snapshots

============================================================
"""

from typing import Callable, Iterable, Iterator, List, Optional, Tuple
import logging

from .models import ChangeKind, ChoiceListChange, Option


logger = logging.getLogger(__name__)


ChoiceListListener = Callable[[ChoiceListChange], None]


def normalize_option(text: str) -> Optional[Option]:
    """Trim text; None when nothing is left."""
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    return trimmed or None


class ChoiceList:
    """
    Ordered, mutable collection of options.

    Duplicates are allowed and are distinct entries by position.
    """

    def __init__(self, options: Optional[Iterable[str]] = None):
        """
        Initialize the list.

        Args:
            options: Initial texts; blank ones are dropped, no notifications
        """
        self._options: List[Option] = []
        self._listeners: List[ChoiceListListener] = []

        for text in options or ():
            option = normalize_option(text)
            if option is not None:
                self._options.append(option)

    # --------------------------------------------------------
    # Mutation
    # --------------------------------------------------------

    def add(self, text: str) -> None:
        """Append the trimmed text. Blank input is ignored."""
        option = normalize_option(text)
        if option is None:
            logger.debug("Ignoring blank choice")
            return

        self._options.append(option)
        index = len(self._options) - 1
        logger.debug(f"Choice added: index={index} option={option!r}")
        self._notify(ChoiceListChange(
            kind=ChangeKind.ADDED,
            index=index,
            option=option,
            size=len(self._options),
        ))

    def remove_at(self, index: int) -> None:
        """Remove the entry at index. Out-of-range indices are ignored."""
        if not self._is_valid_index(index):
            logger.debug(f"Ignoring remove_at({index!r}) on {len(self._options)} choices")
            return

        option = self._options.pop(index)
        logger.debug(f"Choice removed: index={index} option={option!r}")
        self._notify(ChoiceListChange(
            kind=ChangeKind.REMOVED,
            index=index,
            option=option,
            size=len(self._options),
        ))

    def _is_valid_index(self, index: int) -> bool:
        # bool is an int subclass; True must not mean 1 here
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        return 0 <= index < len(self._options)

    # --------------------------------------------------------
    # Read access
    # --------------------------------------------------------

    def length(self) -> int:
        return len(self._options)

    def entries(self) -> Tuple[Option, ...]:
        """Immutable snapshot of the current options, in order."""
        return tuple(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __iter__(self) -> Iterator[Option]:
        return iter(self.entries())

    def __repr__(self) -> str:
        return f"ChoiceList({list(self._options)!r})"

    # --------------------------------------------------------
    # Listeners
    # --------------------------------------------------------

    def register_listener(self, listener: ChoiceListListener) -> None:
        """Register a change listener."""
        self._listeners.append(listener)

    def unregister_listener(self, listener: ChoiceListListener) -> None:
        """Unregister a change listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, change: ChoiceListChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.error(
                    f"Choice list listener error: {e}",
                    exc_info=True,
                )


__all__ = [
    "ChoiceList",
    "ChoiceListListener",
    "normalize_option",
]
