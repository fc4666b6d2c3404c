"""Document ID generation and checks."""

import re

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

# Firestore reserves __name__-style ids and limits ids to 1500 bytes.
_RESERVED_ID = re.compile(r"^__.*__$")
MAX_DOCUMENT_ID_BYTES = 1500


def generate_cuid() -> str:
    """Generate a collision-resistant document id (CUID2)."""
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(f"Expected str from cuid_generator, got {type(result).__name__}")
    return result


def is_valid_document_id(document_id: str) -> bool:
    """Return True if the id can name a document directly under a collection."""
    if not document_id or "/" in document_id or document_id in (".", ".."):
        return False
    if _RESERVED_ID.match(document_id):
        return False
    return len(document_id.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES
