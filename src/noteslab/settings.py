# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass

from gi.repository import Gio

from noteslab.constants import APP_ID, AUTOSAVE_DELAY_MS

SORT_NAMES = ('recent', 'alphabetical', 'custom')


@dataclass
class StoreSettings:
    autosave_delay_ms: int = AUTOSAVE_DELAY_MS
    default_sort: str = 'recent'


def get_settings():
    """Return Gio.Settings for the app, or None if the schema is not installed."""
    schema_source = Gio.SettingsSchemaSource.get_default()
    if schema_source and schema_source.lookup(APP_ID, True):
        return Gio.Settings.new(APP_ID)
    return None


def load_settings() -> StoreSettings:
    settings = get_settings()
    if settings is None:
        return StoreSettings()

    result = StoreSettings()
    delay = settings.get_int('autosave-delay-ms')
    if delay > 0:
        result.autosave_delay_ms = delay
    sort = settings.get_string('default-sort')
    if sort in SORT_NAMES:
        result.default_sort = sort
    return result
