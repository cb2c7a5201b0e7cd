"""
Simple high-level API for docbuilder.

Usage example:
>>> from docbuilder import api
>>>
>>> doc = api.load_document("template.json")
>>> html = api.render_html(doc, data={"customer": {"name": "Ada"}}, mode="instance")
>>> api.render_pdf(doc, "out.pdf", mode="template")
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from .config import RenderOptions
from .exceptions import DocumentFormatError, RenderingError
from .models.document import Document
from .models.signature import SignatureRecord, signatures_from_list
from .renderers.document_renderer import DocumentRenderer
from .renderers.html_renderer import HTMLRenderer
from .renderers.pdf_renderer import PdfRenderer
from .renderers.render_tree import RenderedDocument

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

__all__ = [
    "load_document",
    "save_document",
    "load_data",
    "load_signatures",
    "render_document",
    "render_html",
    "render_pdf",
]


def _read_json(path: PathLike, what: str) -> Any:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentFormatError(f"Cannot read {what}", f"{path}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Invalid JSON in {what}", f"{path}: {e}") from e


def load_document(path: PathLike) -> Document:
    """Load a template from a JSON file."""
    document = Document.from_dict(_read_json(path, "document"))
    logger.info(f"Loaded {document.title!r}: {len(document.pages)} page(s)")
    return document


def save_document(document: Document, path: PathLike) -> Path:
    path = Path(path)
    path.write_text(document.to_json(), encoding="utf-8")
    return path


def load_data(path: Optional[PathLike]) -> Mapping[str, Any]:
    """Load a data context; the top level must be an object."""
    if path is None:
        return {}
    data = _read_json(path, "data")
    if not isinstance(data, Mapping):
        raise DocumentFormatError("Invalid data", "top level must be an object")
    return data


def load_signatures(path: Optional[PathLike]) -> List[SignatureRecord]:
    """Load signature records (a JSON list) from a file."""
    if path is None:
        return []
    items = _read_json(path, "signatures")
    if not isinstance(items, list):
        raise DocumentFormatError("Invalid signatures", "expected a list of records")
    return signatures_from_list(items)


def _options(mode: Optional[str], options: Optional[RenderOptions], **overrides) -> RenderOptions:
    changes = {key: value for key, value in overrides.items() if value is not None}
    if mode:
        changes["mode"] = mode
    return replace(options or RenderOptions(), **changes)


def render_document(document: Document, data: Optional[Mapping[str, Any]] = None,
                    signatures: Optional[Iterable[SignatureRecord]] = None,
                    mode: Optional[str] = None, options: Optional[RenderOptions] = None) -> RenderedDocument:
    """Render to the intermediate page tree."""
    return DocumentRenderer(document, _options(mode, options)).render(data, signatures)


def render_html(document: Document, data: Optional[Mapping[str, Any]] = None,
                signatures: Optional[Iterable[SignatureRecord]] = None,
                mode: Optional[str] = None, options: Optional[RenderOptions] = None,
                scale: Optional[float] = None, output: Optional[PathLike] = None) -> str:
    """Render print-ready HTML; optionally write it to ``output``."""
    opts = _options(mode, options, scale=scale)
    rendered = DocumentRenderer(document, opts).render(data, signatures)
    renderer = HTMLRenderer(rendered, opts.scale)
    html = renderer.render()
    if output is not None:
        try:
            renderer.save_to_file(html, output)
        except OSError as e:
            raise RenderingError("Cannot write HTML", f"{output}: {e}") from e
    return html


def render_pdf(document: Document, output: Optional[PathLike] = None,
               data: Optional[Mapping[str, Any]] = None,
               signatures: Optional[Iterable[SignatureRecord]] = None,
               mode: Optional[str] = None, options: Optional[RenderOptions] = None) -> bytes:
    """Render a PDF; returns its bytes and writes ``output`` when given."""
    rendered = DocumentRenderer(document, _options(mode, options)).render(data, signatures)
    return PdfRenderer(rendered).render(str(output) if output is not None else None)
