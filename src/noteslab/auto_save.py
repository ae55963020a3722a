# SPDX-License-Identifier: GPL-3.0-or-later

from gi.repository import GLib

from noteslab.constants import AUTOSAVE_DELAY_MS


class AutoSave:
    """Collapses bursts of edits into one save using GLib.timeout_add.

    Each trigger() replaces the pending timeout, so the callback runs once,
    delay_ms after the last trigger of a burst. The callback runs on the
    thread that iterates the default main context.
    """

    def __init__(self, save_callback, delay_ms=AUTOSAVE_DELAY_MS):
        self._save_callback = save_callback
        self._delay_ms = delay_ms
        # GLib source ids are always positive; 0 means nothing is scheduled
        self._source_id = 0

    @property
    def delay_ms(self):
        return self._delay_ms

    @property
    def pending(self) -> bool:
        return self._source_id != 0

    def trigger(self):
        """Schedule a save delay_ms from now, dropping any earlier schedule."""
        self.cancel()
        self._source_id = GLib.timeout_add(self._delay_ms, self._fire)

    def cancel(self):
        source_id, self._source_id = self._source_id, 0
        if source_id:
            GLib.source_remove(source_id)

    def save_now(self):
        self.cancel()
        self._save_callback()

    def flush(self):
        """Run a pending save immediately; do nothing if none is pending."""
        if self.pending:
            self.save_now()

    def _fire(self):
        # Cleared before the callback so a trigger() from inside it reschedules
        self._source_id = 0
        self._save_callback()
        return GLib.SOURCE_REMOVE
