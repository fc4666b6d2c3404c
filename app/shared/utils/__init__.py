"""Shared utilities: datetime, generators."""

from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid, is_valid_document_id

__all__ = ["ensure_utc", "generate_cuid", "is_valid_document_id", "utc_now"]
