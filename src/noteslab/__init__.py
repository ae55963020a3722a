# SPDX-License-Identifier: GPL-3.0-or-later

from noteslab.note import BlockType, Note, NoteBlock
from noteslab.note_store import LoadError, NoteStore, NoteStoreError, SaveError, SortOrder

__version__ = '0.1.0'

__all__ = [
    'BlockType',
    'LoadError',
    'Note',
    'NoteBlock',
    'NoteStore',
    'NoteStoreError',
    'SaveError',
    'SortOrder',
]
