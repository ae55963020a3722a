# SPDX-License-Identifier: GPL-3.0-or-later

APP_ID = 'io.github.noteslab.NotesLab'
DATA_DIR_NAME = 'noteslab'

# The version suffix tracks the on-disk schema revision
NOTES_FILENAME = 'notes_v2.json'

AUTOSAVE_DELAY_MS = 300

DEFAULT_ICON = '\U0001F4C4'  # 📄
MAX_HASHTAG_LENGTH = 50
TITLE_MAX_CHARS = 40
PREVIEW_MAX_CHARS = 80
