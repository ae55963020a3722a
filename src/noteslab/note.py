# SPDX-License-Identifier: GPL-3.0-or-later

import base64
import unicodedata
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from noteslab.calculation import evaluate
from noteslab.constants import (
    DEFAULT_ICON,
    MAX_HASHTAG_LENGTH,
    PREVIEW_MAX_CHARS,
    TITLE_MAX_CHARS,
)
from noteslab.rich_text import get_plain_text


def new_id() -> str:
    return str(uuid.uuid4())


class BlockType(Enum):
    TEXT = 'Text'
    HEADING = 'Heading'
    CODE = 'Code'
    CALCULATION = 'Math'
    IMAGE = 'Image'

    @property
    def is_text_like(self) -> bool:
        return self in (BlockType.TEXT, BlockType.HEADING, BlockType.CODE)


def normalize_hashtag(tag) -> Optional[str]:
    """Trim a user-typed tag; None when it is empty or too long."""
    tag = tag.strip()
    if tag.startswith('#'):
        tag = tag[1:].strip()
    if not tag or len(tag) > MAX_HASHTAG_LENGTH:
        return None
    return tag


def _truncate(text, limit):
    if len(text) <= limit:
        return text
    return text[:limit - 1].rstrip() + '…'


def _field(data, key, kind, default=None):
    """Read an optional field, rejecting values of the wrong type."""
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, kind):
        raise TypeError(f'{key!r} must be {kind.__name__}, got {type(value).__name__}')
    return value


def _string_list(data, key):
    values = _field(data, key, list, [])
    if not all(isinstance(v, str) for v in values):
        raise TypeError(f'{key!r} must be a list of str')
    return list(values)


def _timestamp(text):
    """Parse an ISO timestamp as naive local time, like datetime.now()."""
    if not isinstance(text, str):
        raise TypeError(f'timestamp must be str, got {type(text).__name__}')
    value = datetime.fromisoformat(text)
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


@dataclass
class NoteBlock:
    id: str
    type: BlockType
    content: str = ''
    hashtags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    image_data: Optional[bytes] = None
    is_bold: bool = False
    is_italic: bool = False
    use_serif: bool = False

    @classmethod
    def empty(cls, block_type, content='') -> 'NoteBlock':
        return cls(id=new_id(), type=block_type, content=content)

    @property
    def plain_text(self) -> str:
        if self.type in (BlockType.TEXT, BlockType.HEADING):
            return get_plain_text(self.content)
        return self.content

    @property
    def calculation_result(self) -> Optional[str]:
        if self.type is not BlockType.CALCULATION:
            return None
        return evaluate(self.content)

    def add_hashtag(self, tag) -> bool:
        tag = normalize_hashtag(tag)
        if tag is None:
            return False
        self.hashtags.append(tag)
        return True

    def to_dict(self) -> dict:
        image = None
        if self.image_data is not None:
            image = base64.b64encode(self.image_data).decode('ascii')
        return {
            'id': self.id,
            'type': self.type.value,
            'content': self.content,
            'hashtags': list(self.hashtags),
            'createdAt': self.created_at.isoformat(),
            'imageData': image,
            'isBold': self.is_bold,
            'isItalic': self.is_italic,
            'useSerif': self.use_serif,
        }

    @classmethod
    def from_dict(cls, data) -> 'NoteBlock':
        if not isinstance(data['id'], str):
            raise TypeError('block id must be str')
        image = _field(data, 'imageData', str)
        created_at = _field(data, 'createdAt', str)
        return cls(
            id=data['id'],
            type=BlockType(data['type']),
            content=_field(data, 'content', str, ''),
            hashtags=_string_list(data, 'hashtags'),
            # Blocks written before createdAt existed get the load time
            created_at=_timestamp(created_at) if created_at else datetime.now(),
            image_data=base64.b64decode(image, validate=True) if image is not None else None,
            is_bold=_field(data, 'isBold', bool, False),
            is_italic=_field(data, 'isItalic', bool, False),
            use_serif=_field(data, 'useSerif', bool, False),
        )


@dataclass
class Note:
    id: str
    title: str = ''
    icon: str = DEFAULT_ICON
    date: datetime = field(default_factory=datetime.now)
    blocks: list[NoteBlock] = field(default_factory=list)
    card_color_hex: Optional[str] = None

    @property
    def hashtags(self) -> list[str]:
        return sorted({tag for block in self.blocks for tag in block.hashtags})

    @property
    def block_types(self) -> set[BlockType]:
        return {block.type for block in self.blocks}

    def _first_block(self, predicate):
        return next((block for block in self.blocks if predicate(block)), None)

    @property
    def display_title(self) -> str:
        """Title shown on cards, derived from the content when untitled."""
        title = self.title.strip()
        if title:
            return title

        text_block = self._first_block(lambda b: b.type.is_text_like)
        if text_block is not None:
            plain = text_block.plain_text.strip()
            if plain:
                return _truncate(plain, TITLE_MAX_CHARS)

        math_block = self._first_block(lambda b: b.type is BlockType.CALCULATION)
        if math_block is not None:
            return _truncate(math_block.content, TITLE_MAX_CHARS)

        image_block = self._first_block(lambda b: b.type is BlockType.IMAGE)
        if image_block is not None:
            caption = image_block.content.strip()
            if caption:
                return _truncate(caption.split('\n')[0], TITLE_MAX_CHARS)

        tags = self.hashtags
        if tags:
            return _truncate(' '.join(f'#{tag}' for tag in tags), TITLE_MAX_CHARS)

        return 'Untitled'

    @property
    def preview_text(self) -> str:
        text_block = self._first_block(lambda b: b.type.is_text_like)
        if text_block is None:
            return 'New Note'
        return _truncate(text_block.plain_text, PREVIEW_MAX_CHARS)

    def set_icon(self, text) -> bool:
        """Store the first glyph of text if it is an emoji."""
        if not is_emoji_icon(text):
            return False
        self.icon = first_glyph(text)
        return True

    # --- Blocks ---

    def add_block(self, block_type, content='', index=None) -> NoteBlock:
        block = NoteBlock.empty(block_type, content)
        if index is None:
            self.blocks.append(block)
        else:
            self.blocks.insert(index, block)
        return block

    def _block_index(self, block_id):
        for i, block in enumerate(self.blocks):
            if block.id == block_id:
                return i
        return None

    def remove_block(self, block_id) -> bool:
        index = self._block_index(block_id)
        if index is None:
            return False
        del self.blocks[index]
        return True

    def move_block(self, block_id, to_index) -> bool:
        index = self._block_index(block_id)
        if index is None:
            return False
        block = self.blocks.pop(index)
        to_index = max(0, min(to_index, len(self.blocks)))
        self.blocks.insert(to_index, block)
        return True

    # --- Serialization ---

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'icon': self.icon,
            'date': self.date.isoformat(),
            'blocks': [block.to_dict() for block in self.blocks],
            'cardColorHex': self.card_color_hex,
        }

    @classmethod
    def from_dict(cls, data) -> 'Note':
        if not isinstance(data['id'], str):
            raise TypeError('note id must be str')
        return cls(
            id=data['id'],
            title=_field(data, 'title', str, ''),
            icon=_field(data, 'icon', str) or DEFAULT_ICON,
            date=_timestamp(data['date']),
            blocks=[NoteBlock.from_dict(block) for block in _field(data, 'blocks', list, [])],
            card_color_hex=_field(data, 'cardColorHex', str),
        )


# --- Icons ---

_ZWJ = '\u200d'


def _is_regional_indicator(ch):
    return 0x1F1E6 <= ord(ch) <= 0x1F1FF


def _extends_glyph(ch):
    cp = ord(ch)
    return (
        0xFE00 <= cp <= 0xFE0F          # variation selectors
        or 0x1F3FB <= cp <= 0x1F3FF     # skin tones
        or 0xE0020 <= cp <= 0xE007F     # tag sequences
        or unicodedata.category(ch) in ('Mn', 'Me')
    )


def first_glyph(text) -> str:
    """Return the first user-visible glyph of text, with its modifiers."""
    if not text:
        return ''
    end = 1
    if len(text) > 1 and _is_regional_indicator(text[0]) and _is_regional_indicator(text[1]):
        end = 2
    while end < len(text):
        ch = text[end]
        if _extends_glyph(ch):
            end += 1
        elif ch == _ZWJ and end + 1 < len(text):
            end += 2
        else:
            break
    return text[:end]


def is_emoji_icon(text) -> bool:
    # Keycap bases such as '#', '*' and digits sit below U+238C
    return any(
        ord(ch) > 0x238C and unicodedata.category(ch) == 'So'
        for ch in first_glyph(text)
    )
