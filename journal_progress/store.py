"""
Journal Progress Engine - Ledger Store
Single-writer store for the progress ledger with subscribe/notify.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from pydantic import ValidationError

from .config import get_storage_config
from .exceptions import LedgerStoreError
from .models import ProgressLedger

logger = logging.getLogger(__name__)

T = TypeVar("T")
Subscriber = Callable[[ProgressLedger], None]


class LedgerStore:
    """
    Holds the one ProgressLedger of a user.

    Readers get deep copies from `snapshot()`. All writes go through
    `apply()`, which hands a working copy to a mutator and swaps it in
    only when the mutator returns normally.
    """

    def __init__(self, ledger: Optional[ProgressLedger] = None):
        self._ledger = ledger if ledger is not None else ProgressLedger()
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []

    def snapshot(self) -> ProgressLedger:
        with self._lock:
            return self._ledger.model_copy(deep=True)

    def apply(self, mutator: Callable[[ProgressLedger], T]) -> T:
        """Run `mutator` on a working copy and commit it as one unit."""
        with self._lock:
            working = self._ledger.model_copy(deep=True)
            result = mutator(working)
            self._persist(working)
            self._ledger = working
            committed = working.model_copy(deep=True)

        self._notify(committed)
        return result

    def reset(self) -> None:
        """Full data reset back to a zero-valued ledger."""
        self.apply(self._clear)

    @staticmethod
    def _clear(ledger: ProgressLedger) -> None:
        fresh = ProgressLedger()
        for field in ProgressLedger.model_fields:
            setattr(ledger, field, getattr(fresh, field))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            A function that removes the listener again
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, ledger: ProgressLedger) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(ledger)
            except Exception as e:
                logger.error(f"Ledger subscriber {callback!r} failed: {e}")

    def _persist(self, ledger: ProgressLedger) -> None:
        """Hook for durable stores. The in-memory store keeps nothing."""


class JsonLedgerStore(LedgerStore):
    """LedgerStore that writes the ledger to a JSON file on every commit."""

    def __init__(self, path: str):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> ProgressLedger:
        if not self.path.exists():
            logger.info(f"No ledger at {self.path}, starting fresh")
            return ProgressLedger()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return ProgressLedger.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise LedgerStoreError(f"Failed to read ledger: {e}", str(self.path)) from e

    def _persist(self, ledger: ProgressLedger) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(ledger.model_dump_json(indent=2))
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise LedgerStoreError(f"Failed to write ledger: {e}", str(self.path)) from e


def create_store(ledger_path: Optional[str] = None) -> LedgerStore:
    """Build the store configured for this installation."""
    ledger_path = ledger_path or get_storage_config().ledger_path
    if ledger_path:
        return JsonLedgerStore(ledger_path)
    return LedgerStore()
