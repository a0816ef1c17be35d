"""Snapshot emission towards the external save callback."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .models import AnnotationSnapshot

logger = logging.getLogger(__name__)

SaveCallback = Callable[[AnnotationSnapshot], None]


class SnapshotEmitter(QObject):
    """
    Decides when a snapshot is handed to the save callback.

    Three delivery modes are supported:
    - deferred: queued and delivered on the next event loop tick, after
      the triggering change has settled
    - debounced: only the latest snapshot is kept and delivered once no
      new one arrived for the debounce interval
    - immediate: delivered synchronously, cancelling any debounced one

    Every delivered snapshot is an independent copy of the editor state.
    """

    snapshot_ready = pyqtSignal(object)  # Emits AnnotationSnapshot

    def __init__(
        self,
        on_save: Optional[SaveCallback] = None,
        debounce_ms: int = 500,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self._on_save = on_save
        self._disposed = False

        self._pending: List[AnnotationSnapshot] = []
        self._tick_timer = QTimer(self)
        self._tick_timer.setSingleShot(True)
        self._tick_timer.setInterval(0)
        self._tick_timer.timeout.connect(self._deliver_pending)

        self._debounced: Optional[AnnotationSnapshot] = None
        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(debounce_ms)
        self._debounce_timer.timeout.connect(self._deliver_debounced)

    def set_on_save(self, on_save: Optional[SaveCallback]) -> None:
        """Replace the save callback."""
        self._on_save = on_save

    @property
    def debounce_ms(self) -> int:
        return self._debounce_timer.interval()

    @property
    def has_pending(self) -> bool:
        """Check if any snapshot is waiting for delivery."""
        return bool(self._pending) or self._debounced is not None

    @property
    def is_debounce_active(self) -> bool:
        return self._debounce_timer.isActive()

    def emit_deferred(self, snapshot: AnnotationSnapshot) -> None:
        """Queue a snapshot for delivery on the next tick."""
        if self._disposed:
            return
        self._pending.append(snapshot.copy())
        if not self._tick_timer.isActive():
            self._tick_timer.start()

    def emit_debounced(self, snapshot: AnnotationSnapshot) -> None:
        """Replace the debounced snapshot and restart the debounce interval."""
        if self._disposed:
            return
        self._debounced = snapshot.copy()
        self._debounce_timer.start()

    def emit_now(self, snapshot: AnnotationSnapshot) -> None:
        """
        Deliver a snapshot immediately, superseding any debounced one.

        Snapshots already queued for the next tick are delivered first so
        the callback always sees them in the order they were taken.
        """
        if self._disposed:
            return
        snapshot = snapshot.copy()
        self.cancel_debounce()
        self._tick_timer.stop()
        self._deliver_pending()
        self._deliver(snapshot)

    def cancel_debounce(self) -> None:
        """Drop the debounced snapshot without delivering it."""
        self._debounce_timer.stop()
        self._debounced = None

    def flush(self) -> None:
        """Deliver everything pending right away, in order."""
        self._tick_timer.stop()
        self._deliver_pending()
        if self._debounced is not None:
            self._debounce_timer.stop()
            self._deliver_debounced()

    def dispose(self) -> None:
        """Stop all timers and drop pending snapshots; nothing is delivered afterwards."""
        self._tick_timer.stop()
        self._debounce_timer.stop()
        self._pending.clear()
        self._debounced = None
        self._disposed = True
        logger.debug("Snapshot emitter disposed")

    def _deliver_pending(self) -> None:
        pending, self._pending = self._pending, []
        for snapshot in pending:
            self._deliver(snapshot)

    def _deliver_debounced(self) -> None:
        snapshot, self._debounced = self._debounced, None
        if snapshot is not None:
            self._deliver(snapshot)

    def _deliver(self, snapshot: AnnotationSnapshot) -> None:
        if self._disposed:
            return
        self.snapshot_ready.emit(snapshot)
        if self._on_save is None:
            return
        try:
            self._on_save(snapshot)
        except Exception as e:
            logger.error(f"Save callback failed: {e}", exc_info=True)
