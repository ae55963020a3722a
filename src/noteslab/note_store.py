# SPDX-License-Identifier: GPL-3.0-or-later

import copy
import json
import logging
import os
from datetime import datetime
from enum import Enum

from gi.repository import GLib, GObject

from noteslab.auto_save import AutoSave
from noteslab.colors import random_card_color
from noteslab.constants import DATA_DIR_NAME, NOTES_FILENAME
from noteslab.note import Note, NoteBlock, new_id
from noteslab.settings import load_settings

logger = logging.getLogger(__name__)


class NoteStoreError(Exception):
    pass


class LoadError(NoteStoreError):
    """The notes file exists but could not be read or decoded."""


class SaveError(NoteStoreError):
    """The notes could not be encoded or written."""


class SortOrder(Enum):
    RECENT = 'recent'
    ALPHABETICAL = 'alphabetical'
    CUSTOM = 'custom'


def default_notes_path():
    data_dir = os.path.join(GLib.get_user_data_dir(), DATA_DIR_NAME)
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, NOTES_FILENAME)


def encode_notes(notes) -> bytes:
    payload = [note.to_dict() for note in notes]
    return json.dumps(payload, ensure_ascii=False, indent=2).encode('utf-8')


def decode_notes(data) -> list[Note]:
    """Decode the persisted file contents, raising LoadError on any mismatch."""
    try:
        raw = json.loads(data)
        if not isinstance(raw, list):
            raise TypeError(f'expected a list of notes, got {type(raw).__name__}')
        return [Note.from_dict(item) for item in raw]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and bad base64
        raise LoadError(f'Failed to load notes: {type(e).__name__}: {e}') from e


class NoteStore(GObject.Object):
    """In-memory list of notes, persisted to a JSON file.

    All mutations go through the methods below. Readers get copies, so the
    canonical list only changes here. Every mutation emits 'notes-changed'
    and schedules a debounced save. Storage failures never raise to the
    caller; they are reported through the 'error' property.
    """

    __gsignals__ = {
        'notes-changed': (GObject.SignalFlags.RUN_LAST, None, ()),
        'saved': (GObject.SignalFlags.RUN_LAST, None, ()),
    }

    error = GObject.Property(type=str, default=None)

    def __init__(self, path=None, delay_ms=None):
        super().__init__()
        settings = load_settings()
        if path is None:
            path = default_notes_path()
        if delay_ms is None:
            delay_ms = settings.autosave_delay_ms

        self._path = path
        self._default_sort = SortOrder(settings.default_sort)
        self._notes = []
        self._save_failed = False
        self._auto_save = AutoSave(self._save, delay_ms)
        self.load()

    @property
    def path(self):
        return self._path

    @property
    def notes(self) -> list[Note]:
        return copy.deepcopy(self._notes)

    @property
    def save_pending(self) -> bool:
        return self._auto_save.pending

    def __contains__(self, note_id):
        return self._index_of(note_id) is not None

    def _index_of(self, note_id):
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        return None

    def _changed(self):
        self.emit('notes-changed')
        self._auto_save.trigger()

    # --- Errors ---

    def _set_error(self, message):
        if self.error != message:
            self.error = message

    def _report(self, error):
        logger.warning('%s (%s)', error, self._path)
        self._set_error(str(error))

    def clear_error(self):
        self._save_failed = False
        self._set_error(None)

    # --- Loading ---

    def load(self):
        """Replace the in-memory notes with the file contents.

        A missing file is a first run and yields an empty list. An unreadable
        or undecodable file also yields an empty list, with 'error' set.
        """
        self._auto_save.cancel()
        self._notes = []
        self._save_failed = False

        if not os.path.exists(self._path):
            self._set_error(None)
        else:
            try:
                with open(self._path, 'rb') as f:
                    data = f.read()
                self._notes = decode_notes(data)
            except OSError as e:
                self._report(LoadError(f'Failed to load notes: {e}'))
            except LoadError as e:
                self._report(e)
            else:
                logger.debug('Loaded %d notes from %s', len(self._notes), self._path)
                self._set_error(None)

        self.emit('notes-changed')

    # --- Notes CRUD ---

    def create_note(self, block_type=None, content='', title='') -> Note:
        """Insert a new note at the top; seed one block if block_type is given."""
        note_id = new_id()
        while note_id in self:
            note_id = new_id()

        blocks = []
        if block_type is not None:
            blocks.append(NoteBlock.empty(block_type, content))

        note = Note(
            id=note_id,
            title=title,
            date=datetime.now(),
            blocks=blocks,
            card_color_hex=random_card_color(),
        )
        self._notes.insert(0, note)
        self._changed()
        return copy.deepcopy(note)

    def get_note(self, note_id) -> Note | None:
        index = self._index_of(note_id)
        if index is None:
            return None
        return copy.deepcopy(self._notes[index])

    def update_note(self, note):
        """Replace the stored note with the same id; unknown ids are ignored."""
        index = self._index_of(note.id)
        if index is None:
            return
        stored = copy.deepcopy(note)
        stored.date = datetime.now()
        self._notes[index] = stored
        self._changed()

    def delete_note(self, note):
        """Delete by Note or by id."""
        note_id = note.id if isinstance(note, Note) else note
        index = self._index_of(note_id)
        if index is None:
            return
        del self._notes[index]
        self._changed()

    def delete_notes_at(self, indices):
        doomed = {i for i in indices if 0 <= i < len(self._notes)}
        if not doomed:
            return
        self._notes = [note for i, note in enumerate(self._notes) if i not in doomed]
        self._changed()

    def swap_notes(self, id_a, id_b):
        """Exchange the positions of two notes, for manual reordering."""
        if id_a == id_b:
            return
        index_a = self._index_of(id_a)
        index_b = self._index_of(id_b)
        if index_a is None or index_b is None:
            return
        self._notes[index_a], self._notes[index_b] = self._notes[index_b], self._notes[index_a]
        self._changed()

    # --- Search ---

    @staticmethod
    def _matches(note, needle):
        if not needle:
            return True
        if needle in note.title.casefold():
            return True
        if any(needle in tag.casefold() for block in note.blocks for tag in block.hashtags):
            return True
        return any(needle in block.plain_text.casefold() for block in note.blocks)

    def search_notes(self, query='', block_type=None, sort=None) -> list[Note]:
        """Linear case-insensitive scan over titles, hashtags and block text."""
        needle = query.strip().casefold()
        matches = [
            note for note in self._notes
            if self._matches(note, needle)
            and (block_type is None or block_type in note.block_types)
        ]

        if sort is None:
            sort = self._default_sort
        if sort is SortOrder.RECENT:
            matches.sort(key=lambda n: n.date, reverse=True)
        elif sort is SortOrder.ALPHABETICAL:
            matches.sort(key=lambda n: n.title.casefold())
        return copy.deepcopy(matches)

    def get_all_hashtags(self) -> list[str]:
        return sorted({tag for note in self._notes for tag in note.hashtags})

    # --- Saving ---

    def _save(self):
        try:
            data = encode_notes(self._notes)
            # Writes a temporary file and renames it over the target
            GLib.file_set_contents(self._path, data)
        except (TypeError, ValueError, GLib.Error, OSError) as e:
            self._save_failed = True
            self._report(SaveError(f'Failed to save notes: {e}'))
            return

        logger.debug('Saved %d notes to %s', len(self._notes), self._path)
        if self._save_failed:
            self._save_failed = False
            self._set_error(None)
        self.emit('saved')

    def save_now(self):
        self._auto_save.save_now()

    def close(self):
        self._auto_save.flush()
