"""Reactive state container with Qt signal integration.

Observable wraps a value and notifies listeners when it changes, so the
dashboard can recompute derived data whenever an input is replaced.
"""

from typing import Callable, Generic, Optional, TypeVar

from PySide6.QtCore import QObject, Signal

T = TypeVar("T")


class Observable(QObject, Generic[T]):
    """Reactive state container with Qt signal integration.

    Values are compared by equality, so replacing the filters with an equal
    FilterOptions (or the records with an equal list) does not re-run the
    pipeline.

    Example:
        >>> filters = Observable(get_default_filters())
        >>> filters.changed.connect(lambda f: print(f.time_period))
        >>> filters.update(lambda f: f.toggle_category("Food"))
    """

    changed = Signal(object)  # Emitted when value changes

    def __init__(self, initial: T, parent: Optional[QObject] = None):
        """Initialize observable with initial value.

        Args:
            initial: Initial value (filters, records or a pipeline result)
            parent: Optional Qt parent object
        """
        super().__init__(parent)
        self._value = initial

    @property
    def value(self) -> T:
        """Get current value.

        Returns:
            Current value
        """
        return self._value

    def set(self, new_value: T) -> None:
        """Replace the value and emit ``changed`` if it differs.

        Args:
            new_value: Replacement value

        Note:
            Signal is only emitted if new_value != current value
        """
        if new_value != self._value:
            self._value = new_value
            self.changed.emit(new_value)

    def update(self, fn: Callable[[T], T]) -> None:
        """Replace the value with ``fn(current)``.

        Args:
            fn: Function that takes the current value and returns a new one

        Example:
            >>> filters.update(lambda f: f.with_search("coffee"))
        """
        self.set(fn(self._value))

    def subscribe(self, callback: Callable[[T], None]) -> None:
        """Subscribe to value changes.

        Args:
            callback: Function called with the new value when it changes
        """
        self.changed.connect(callback)
