# SPDX-License-Identifier: GPL-3.0-or-later
"""
Rich text encoding for the content of text and heading blocks.

JSON format:
{
  "blocks": [
    {
      "type": "paragraph",
      "runs": [
        {"text": "hello ", "tags": []},
        {"text": "world", "tags": ["bold", "italic"]}
      ]
    }
  ]
}

Supported tags: bold, italic, underline, strikethrough, serif

Content that is not in this format is treated as plain text. Content saved
by older versions may hold HTML, which is only ever read, never written.
"""

import html
import json
import re


TAG_NAMES = {'bold', 'italic', 'underline', 'strikethrough', 'serif'}

_STYLE_RE = re.compile(r'<style[\s\S]*?</style>', re.IGNORECASE)
_HTML_TAG_RE = re.compile(r'<[^>]+>')


def make_run(text, *tags) -> dict:
    return {'text': text, 'tags': sorted(t for t in tags if t in TAG_NAMES)}


def serialize(paragraphs) -> str:
    """Serialize a list of paragraphs (each a list of runs) to a JSON string."""
    blocks = []
    for runs in paragraphs:
        clean_runs = []
        for run in runs:
            text = run.get('text', '')
            tags = sorted(set(run.get('tags', [])) & TAG_NAMES)
            clean_runs.append({'text': text, 'tags': tags})
        blocks.append({'type': 'paragraph', 'runs': clean_runs})
    return json.dumps({'blocks': blocks}, ensure_ascii=False)


def _load(content):
    """Return the decoded document, or None if content is not rich text."""
    if not content or not content.lstrip().startswith('{'):
        return None
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict) or not isinstance(data.get('blocks'), list):
        return None
    return data


def is_rich_text(content) -> bool:
    return _load(content) is not None


def deserialize(content) -> list:
    """Deserialize content into paragraphs of runs."""
    if not content:
        return []

    data = _load(content)
    if data is None:
        # Plain text fallback
        return [[make_run(line)] for line in content.split('\n')]

    paragraphs = []
    for block in data['blocks']:
        runs = []
        for run in _runs(block):
            tags = [t for t in run.get('tags', []) if t in TAG_NAMES]
            runs.append({'text': run.get('text', ''), 'tags': sorted(tags)})
        paragraphs.append(runs)
    return paragraphs


def _runs(block):
    if not isinstance(block, dict):
        return []
    return [run for run in block.get('runs', []) if isinstance(run, dict)]


def _strip_html(text):
    plain = _STYLE_RE.sub('', text)
    plain = _HTML_TAG_RE.sub('', plain)
    return html.unescape(plain).replace('\xa0', ' ').strip()


def get_plain_text(content) -> str:
    """Extract plain text from block content (for previews and search)."""
    if not content:
        return ''

    data = _load(content)
    if data is not None:
        lines = []
        for block in data['blocks']:
            text = ''.join(run.get('text', '') for run in _runs(block))
            lines.append(text)
        return '\n'.join(lines)

    if '<' in content:
        return _strip_html(content)
    return content
