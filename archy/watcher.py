"""
File system watcher that triggers graph rebuilds.

Markdown changes are debounced: editors often write a file several times per
save, and one rebuild per burst is enough since every refresh rebuilds the
whole graph from the vault.
"""

import logging
import time
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class VaultChangeHandler(FileSystemEventHandler):
    """Records markdown changes and reports them once the vault is quiet."""

    RELEVANT_EXTENSIONS = {".md"}
    DEBOUNCE_SECONDS = 0.5

    def __init__(self, vault_path: Path, on_change: Callable[[set[Path]], None]):
        super().__init__()
        self.vault_path = vault_path
        self.on_change = on_change
        self.pending: set[Path] = set()
        self.last_event_at = 0.0

    def _is_relevant(self, path: str) -> bool:
        p = Path(path)
        if p.suffix.lower() not in self.RELEVANT_EXTENSIONS:
            return False
        try:
            rel = p.resolve().relative_to(self.vault_path.resolve())
        except ValueError:
            return False
        return not any(part.startswith(".") for part in rel.parts)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        paths = [event.src_path, getattr(event, "dest_path", "") or ""]
        relevant = [Path(p) for p in paths if p and self._is_relevant(p)]
        if not relevant:
            return
        self.pending.update(relevant)
        self.last_event_at = time.monotonic()

    def flush_pending(self, now: float | None = None) -> bool:
        """Report pending changes if the debounce window has passed."""
        if not self.pending:
            return False
        now = time.monotonic() if now is None else now
        if now - self.last_event_at < self.DEBOUNCE_SECONDS:
            return False
        changed, self.pending = self.pending, set()
        logger.debug("Vault changed: %d file(s)", len(changed))
        self.on_change(changed)
        return True


def run_watch_loop(vault_path: Path, on_change: Callable[[set[Path]], None]) -> None:
    """Watch vault_path until interrupted, calling on_change after each burst of edits."""
    handler = VaultChangeHandler(vault_path, on_change)
    observer = Observer()
    observer.schedule(handler, str(vault_path), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(0.25)
            handler.flush_pending()
    except KeyboardInterrupt:
        logger.debug("Watch loop interrupted")
    finally:
        observer.stop()
        observer.join()
