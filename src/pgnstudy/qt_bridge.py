"""Qt bridge to parse large PGN collections in a worker thread."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from pgnstudy.core.notation import Collection, ParserOptions, parse_multiple

_LOGGER = logging.getLogger(__name__)


class _LoadCommandBus(QObject):
    load_requested = pyqtSignal(str, int)


class StudyLoadWorker(QObject):
    """Thread-affine worker that parses PGN text on demand."""

    progress = pyqtSignal(int, int, int)  # request_id, done, total
    collection_ready = pyqtSignal(int, object)  # request_id, collection
    load_error = pyqtSignal(int, str)  # request_id, message

    __slots__ = ("_options",)

    def __init__(self, *, options: ParserOptions | None = None) -> None:
        super().__init__()
        self._options = options or ParserOptions()

    @pyqtSlot(str, int)
    def load(self, pgn_text: str, request_id: int) -> None:
        """Parse *pgn_text* and emit the resulting collection."""
        try:
            collection = parse_multiple(
                pgn_text,
                self._options,
                on_progress=lambda done, total: self.progress.emit(
                    request_id,
                    done,
                    total,
                ),
            )
        except Exception as exc:
            _LOGGER.exception("Study load %d failed", request_id)
            self.load_error.emit(request_id, str(exc))
            return
        self.collection_ready.emit(request_id, collection)

    @pyqtSlot(int)
    def set_yield_every(self, yield_every: int) -> None:
        """Change the progress granularity (takes effect on the next load)."""
        self._options = replace(self._options, yield_every=yield_every)


class StudyLoadSession:
    """Owns worker-thread lifecycle for study load requests."""

    __slots__ = (
        "__weakref__",
        "_on_progress",
        "_on_loaded",
        "_on_failed",
        "_command_bus",
        "_thread",
        "_worker",
        "_is_started",
        "_is_shutting_down",
        "_pending_request_id",
        "_next_request_id",
    )

    def __init__(
        self,
        *,
        on_progress: Callable[[int, int], None],
        on_loaded: Callable[[Collection], None],
        on_failed: Callable[[str], None],
        options: ParserOptions | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._on_progress = on_progress
        self._on_loaded = on_loaded
        self._on_failed = on_failed

        self._command_bus = _LoadCommandBus(parent)
        self._thread = QThread(parent)
        self._worker = StudyLoadWorker(options=options)
        self._is_started = False
        self._is_shutting_down = False
        self._pending_request_id: int | None = None
        self._next_request_id = 0

    def setup(self) -> None:
        """Start worker thread and connect cross-thread signals."""
        if self._is_started:
            return
        self._is_shutting_down = False
        self._worker.moveToThread(self._thread)
        self._command_bus.load_requested.connect(self._worker.load)
        self._worker.progress.connect(self._on_worker_progress)
        self._worker.collection_ready.connect(self._on_worker_loaded)
        self._worker.load_error.connect(self._on_worker_failed)
        self._thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Drop pending work and stop the worker thread."""
        if not self._is_started:
            return
        self._is_shutting_down = True
        self.discard_pending()
        self._thread.quit()
        self._thread.wait(2000)
        self._is_started = False

    def start_load(self, pgn_text: str) -> bool:
        """Queue a parse; results of earlier requests are ignored from now on."""
        if not pgn_text.strip():
            return False
        if not self._is_started:
            self.setup()
        if self._is_shutting_down:
            return False

        self._next_request_id += 1
        request_id = self._next_request_id
        self._pending_request_id = request_id
        self._command_bus.load_requested.emit(pgn_text, request_id)
        return True

    def discard_pending(self) -> None:
        """Forget the active request; its results will not be delivered."""
        self._pending_request_id = None

    def _on_worker_progress(self, request_id: int, done: int, total: int) -> None:
        if request_id != self._pending_request_id:
            return
        self._on_progress(done, total)

    def _on_worker_loaded(self, request_id: int, collection_obj: object) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_request_id:
            return
        self._pending_request_id = None
        if not isinstance(collection_obj, Collection):
            self._on_failed("Study loader produced an invalid collection")
            return
        self._on_loaded(collection_obj)

    def _on_worker_failed(self, request_id: int, message: str) -> None:
        if self._is_shutting_down:
            return
        if request_id != self._pending_request_id:
            return
        self._pending_request_id = None
        self._on_failed(message)
