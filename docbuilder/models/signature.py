"""Signature artifacts attached to document instances."""

from __future__ import annotations

import base64
import binascii
import hashlib
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..exceptions import SignatureError
from .base import dump_fields, load_fields, require_mapping
from .blocks import SignatureBlock

_DATA_URL_RE = re.compile(r"^data:image/\w+;base64,")

HASH_PREVIEW_LENGTH = 16


@dataclass(slots=True)
class SignatureRecord:
    block_id: str
    signature_png_url: str
    signature_hash: str
    signed_at_local: str
    tz: str

    @property
    def hash_preview(self) -> str:
        """First 16 characters of the hash, used on the rendered page."""
        return self.signature_hash[:HASH_PREVIEW_LENGTH]

    def to_dict(self) -> Dict[str, Any]:
        return dump_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SignatureRecord":
        kwargs = load_fields(cls, require_mapping(data, "signature record"))
        return cls(**{name: str(kwargs.get(name) or "") for name in
                      ("block_id", "signature_png_url", "signature_hash", "signed_at_local", "tz")})


def data_url_payload(image_data_url: str) -> str:
    """Return the base64 payload of an image data URL.

    Raises:
        SignatureError: if the URL is not a base64 image data URL.
    """
    if not _DATA_URL_RE.match(image_data_url or ""):
        raise SignatureError("Signature must be a base64 image data URL")
    payload = _DATA_URL_RE.sub("", image_data_url, count=1)
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SignatureError("Signature payload is not valid base64", str(e)) from e
    return payload


def signature_hash(image_data_url: str) -> str:
    """SHA-256 hex digest of the base64 payload of a signature image."""
    return hashlib.sha256(data_url_payload(image_data_url).encode("ascii")).hexdigest()


def sign_block(block_id: str, image_data_url: str, signed_at_local: str, tz: str) -> SignatureRecord:
    """Build the record stored when a signature block is signed."""
    if not block_id or not signed_at_local or not tz:
        raise SignatureError("Missing required signature fields")
    return SignatureRecord(
        block_id=block_id,
        signature_png_url=image_data_url,
        signature_hash=signature_hash(image_data_url),
        signed_at_local=signed_at_local,
        tz=tz,
    )


def find_signature(records: Optional[Iterable[SignatureRecord]], block_id: str) -> Optional[SignatureRecord]:
    for record in records or ():
        if record.block_id == block_id:
            return record
    return None


def signatures_from_list(items: Iterable[Mapping[str, Any]]) -> List[SignatureRecord]:
    return [SignatureRecord.from_dict(item) for item in items]


def is_fully_signed(document, records: Iterable[SignatureRecord]) -> bool:
    """True when the document has signature blocks and every one of them has a record."""
    signed = {record.block_id for record in records}
    required = [block.id for _, block in document.iter_blocks() if isinstance(block, SignatureBlock)]
    return bool(required) and all(block_id in signed for block_id in required)
