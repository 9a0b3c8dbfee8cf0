"""
Nettoyage de balisage HTML vers du texte brut.

Everything here is regex based and pure. Block patterns are lazy and need a
matching close tag: an unterminated ``<script>`` (or nav/header/footer/...)
is left where it is rather than swallowing the rest of the document.
"""

import re
from typing import Iterable

_FLAGS = re.IGNORECASE | re.DOTALL

COMMENT_RE = re.compile(r'<!--.*?-->', re.DOTALL)
TAG_RE = re.compile(r'<[^>]+>')
WHITESPACE_RE = re.compile(r'\s+')

SCRIPT_TAGS = ('script', 'style')
LAYOUT_TAGS = ('nav', 'header', 'footer')

_block_cache = {}


def block_pattern(tag: str) -> re.Pattern:
    """Pattern matching ``<tag ...>...</tag>`` lazily, case-insensitive."""
    pattern = _block_cache.get(tag)
    if pattern is None:
        pattern = re.compile(rf'<{tag}\b[^>]*>.*?</{tag}\s*>', _FLAGS)
        _block_cache[tag] = pattern
    return pattern


def strip_blocks(markup: str, tags: Iterable[str]) -> str:
    """Remove each ``tag`` block, content included."""
    for tag in tags:
        markup = block_pattern(tag).sub('', markup)
    return markup


def strip_comments(markup: str) -> str:
    return COMMENT_RE.sub('', markup)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(' ', text).strip()


def sanitize(markup: str) -> str:
    """Convertit du HTML en une seule ligne de texte brut.

    1. drop script/style blocks and comments
    2. drop nav/header/footer blocks
    3. replace every remaining tag with a space
    4. collapse whitespace and trim
    """
    if not markup:
        return ""
    text = strip_blocks(markup, SCRIPT_TAGS)
    text = strip_comments(text)
    text = strip_blocks(text, LAYOUT_TAGS)
    text = TAG_RE.sub(' ', text)
    return collapse_whitespace(text)


# Passe structurelle

HEADING_RE = re.compile(r'<h([1-6])\b[^>]*>(.*?)</h\1\s*>', _FLAGS)
PARAGRAPH_RE = re.compile(r'<p\b[^>]*>(.*?)</p\s*>', _FLAGS)
BREAK_RE = re.compile(r'<br\s*/?>', re.IGNORECASE)
LIST_ITEM_RE = re.compile(r'<li\b[^>]*>(.*?)</li\s*>\s*', _FLAGS)
LIST_CLOSE_RE = re.compile(r'</(?:ul|ol)\s*>', re.IGNORECASE)

BULLET = '• '

# &amp; last so "&amp;lt;" decodes to "&lt;" and not "<"
ENTITIES = (
    ('&nbsp;', ' '),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&amp;', '&'),
)


def decode_entities(text: str) -> str:
    """Décode le petit ensemble d'entités supporté"""
    for entity, char in ENTITIES:
        text = text.replace(entity, char)
    return text


def collapse_blank_lines(text: str) -> str:
    text = re.sub(r'[ \t\xa0]+', ' ', text)
    text = re.sub(r' *\n *', '\n', text)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def structured_text(fragment: str) -> str:
    """Texte lisible en conservant titres, paragraphes et listes.

    Headings become blocks surrounded by blank lines, paragraphs single lines
    of their own, ``<br>`` a newline and ``<li>`` a bulleted line. Inner
    whitespace of each block is collapsed to single spaces. Other tags
    are dropped before entities are decoded.
    """
    if not fragment:
        return ""
    text = HEADING_RE.sub(lambda m: f'\n\n{collapse_whitespace(m.group(2))}\n\n', fragment)
    text = PARAGRAPH_RE.sub(lambda m: f'\n{collapse_whitespace(m.group(1))}\n', text)
    text = BREAK_RE.sub('\n', text)
    text = LIST_ITEM_RE.sub(lambda m: f'{BULLET}{collapse_whitespace(m.group(1))}\n', text)
    text = LIST_CLOSE_RE.sub('\n', text)
    text = TAG_RE.sub('', text)
    text = decode_entities(text)
    return collapse_blank_lines(text)


def truncate(text: str, max_length: int, marker: str) -> str:
    """Tronque ``text`` à ``max_length`` caractères, marqueur ajouté si coupé"""
    if len(text) > max_length:
        return text[:max_length] + marker
    return text
