"""Shared helpers: structured logging, id generation, UTC time"""
from .logger import get_logger, setup_logging, get_correlation_id, set_correlation_id
from .idgen import generate_id, generate_document_number, generate_verification_code
from .time import utc_now, ensure_utc, format_iso, add_years, hours_since

__all__ = [
    "get_logger",
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "generate_id",
    "generate_document_number",
    "generate_verification_code",
    "utc_now",
    "ensure_utc",
    "format_iso",
    "add_years",
    "hours_since",
]
