"""Binary encoding for cached item lists.

Layout: 4-byte magic, 1-byte format version, zlib-compressed JSON array of
``[name, value, type]`` records.
"""

import json
import zlib
from typing import List, Sequence

from ..catalog.models import Item
from ..exceptions import CacheError

MAGIC = b"LAIC"
FORMAT_VERSION = 1
_HEADER_SIZE = len(MAGIC) + 1


def encode_items(items: Sequence[Item]) -> bytes:
    """Encode items into the cache payload format."""
    payload = json.dumps([item.to_record() for item in items], ensure_ascii=False, separators=(",", ":"))
    return MAGIC + bytes([FORMAT_VERSION]) + zlib.compress(payload.encode("utf-8"))


def decode_items(data: bytes) -> List[Item]:
    """
    Decode a cache payload.

    Raises:
        CacheError: If the payload is corrupt or written by another format version
    """
    if len(data) < _HEADER_SIZE or data[:len(MAGIC)] != MAGIC:
        raise CacheError("Not a launcher cache file")

    version = data[len(MAGIC)]
    if version != FORMAT_VERSION:
        raise CacheError(f"Unsupported cache format version {version} (expected {FORMAT_VERSION})")

    try:
        records = json.loads(zlib.decompress(data[_HEADER_SIZE:]).decode("utf-8"))
        if not isinstance(records, list):
            raise ValueError("payload is not a list")
        return [Item.from_record(record) for record in records]
    except (zlib.error, UnicodeDecodeError, ValueError) as e:
        raise CacheError(f"Corrupt cache payload: {e}") from e
