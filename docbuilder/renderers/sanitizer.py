"""
HTML sanitizer for paragraph blocks.

Keeps inline formatting, lists, links and simple structure; drops scripts,
styles, embedded frames, event-handler attributes and ``javascript:`` URLs.
"""

from __future__ import annotations

import logging
import re
from html import escape
from html.parser import HTMLParser
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset({
    "a", "b", "strong", "i", "em", "u", "s", "strike", "sub", "sup", "small", "mark",
    "p", "br", "div", "span", "blockquote", "pre", "code", "hr",
    "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6", "img",
})

# Dropped together with everything inside them.
DROP_CONTENT_TAGS = frozenset({
    "script", "style", "iframe", "object", "embed", "template", "noscript", "svg", "math", "frame", "frameset",
})

VOID_TAGS = frozenset({"br", "hr", "img"})

ALLOWED_ATTRIBUTES = {
    "a": frozenset({"href", "title", "target", "rel"}),
    "img": frozenset({"src", "alt", "title", "width", "height"}),
    "ol": frozenset({"start", "type"}),
}
GLOBAL_ATTRIBUTES = frozenset({"class", "title"})

URL_ATTRIBUTES = frozenset({"href", "src"})
SAFE_URL_SCHEMES = ("http", "https", "mailto", "tel")

_SCHEME_RE = re.compile(r"^\s*([a-zA-Z][a-zA-Z0-9+.\-]*):")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x20]+")

BLOCK_LEVEL_TAGS = frozenset({"p", "div", "li", "blockquote", "pre", "h1", "h2", "h3", "h4", "h5", "h6", "br", "hr"})


def is_safe_url(url: str, tag: str = "a") -> bool:
    """Relative URLs and http(s)/mailto/tel are safe; images may also use ``data:image/``."""
    compact = _CONTROL_CHARS_RE.sub("", url or "")
    match = _SCHEME_RE.match(compact)
    if not match:
        return True
    scheme = match.group(1).lower()
    if scheme in SAFE_URL_SCHEMES:
        return True
    return tag == "img" and compact.lower().startswith("data:image/")


class HTMLSanitizer(HTMLParser):
    """Streaming allowlist sanitizer built on :class:`html.parser.HTMLParser`."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.out: List[str] = []
        self.open_tags: List[str] = []
        self.drop_depth = 0

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        tag = tag.lower()
        if tag in DROP_CONTENT_TAGS:
            self.drop_depth += 1
            return
        if self.drop_depth or tag not in ALLOWED_TAGS:
            return
        self.out.append(self._start(tag, attrs))
        if tag not in VOID_TAGS:
            self.open_tags.append(tag)

    def handle_startendtag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        tag = tag.lower()
        if self.drop_depth or tag in DROP_CONTENT_TAGS or tag not in ALLOWED_TAGS:
            return
        self.out.append(self._start(tag, attrs))
        if tag not in VOID_TAGS:
            self.out.append(f"</{tag}>")

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag in DROP_CONTENT_TAGS:
            self.drop_depth = max(0, self.drop_depth - 1)
            return
        if self.drop_depth or tag in VOID_TAGS or tag not in self.open_tags:
            return
        # Close anything left open inside this element.
        while self.open_tags:
            open_tag = self.open_tags.pop()
            self.out.append(f"</{open_tag}>")
            if open_tag == tag:
                break

    def handle_data(self, data: str) -> None:
        if not self.drop_depth:
            self.out.append(escape(data, quote=False))

    def close(self) -> None:
        super().close()
        while self.open_tags:
            self.out.append(f"</{self.open_tags.pop()}>")

    def _start(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> str:
        allowed = ALLOWED_ATTRIBUTES.get(tag, frozenset()) | GLOBAL_ATTRIBUTES
        parts = [tag]
        kept = set()
        for name, value in attrs:
            name = name.lower()
            if name not in allowed or name.startswith("on") or name in kept:
                continue
            value = value or ""
            if name in URL_ATTRIBUTES and not is_safe_url(value, tag):
                logger.debug(f"Dropping unsafe {name} on <{tag}>")
                continue
            kept.add(name)
            parts.append(f'{name}="{escape(value, quote=True)}"')
        if tag == "a" and "target" in kept and "rel" not in kept:
            parts.append('rel="noopener noreferrer"')
        return "<" + " ".join(parts) + ">"


def sanitize_html(html: Optional[str]) -> str:
    """Return ``html`` with only the allowlisted tags and attributes."""
    if not html:
        return ""
    sanitizer = HTMLSanitizer()
    sanitizer.feed(html)
    sanitizer.close()
    return "".join(sanitizer.out)


class _TextExtractor(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.lines: List[str] = [""]
        self.list_stack: List[List[int]] = []
        self.drop_depth = 0
        self.pending_space = False

    def _break(self) -> None:
        self.pending_space = False
        if self.lines[-1].strip():
            self.lines.append("")

    def handle_starttag(self, tag, attrs):
        tag = tag.lower()
        if tag in DROP_CONTENT_TAGS:
            self.drop_depth += 1
        elif tag in ("ul", "ol"):
            self._break()
            self.list_stack.append([0 if tag == "ol" else -1])
        elif tag == "li":
            self._break()
            if self.list_stack and self.list_stack[-1][0] >= 0:
                self.list_stack[-1][0] += 1
                self.lines[-1] += f"{self.list_stack[-1][0]}. "
            else:
                self.lines[-1] += "• "
        elif tag in BLOCK_LEVEL_TAGS:
            self._break()

    def handle_endtag(self, tag):
        tag = tag.lower()
        if tag in DROP_CONTENT_TAGS:
            self.drop_depth = max(0, self.drop_depth - 1)
        elif tag in ("ul", "ol"):
            if self.list_stack:
                self.list_stack.pop()
            self._break()
        elif tag in BLOCK_LEVEL_TAGS:
            self._break()

    def handle_data(self, data):
        if self.drop_depth:
            return
        text = " ".join(data.split())
        if not text:
            self.pending_space = self.pending_space or bool(data)
            return
        if self.lines[-1] and (self.pending_space or data[0].isspace()):
            self.lines[-1] += " "
        self.lines[-1] += text
        self.pending_space = data[-1].isspace()


def html_to_text_lines(html: Optional[str]) -> List[str]:
    """Plain-text lines of an HTML fragment (paragraphs and list items become lines)."""
    if not html:
        return []
    extractor = _TextExtractor()
    extractor.feed(html)
    extractor.close()
    return [line.strip() for line in extractor.lines if line.strip()]
