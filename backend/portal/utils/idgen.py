"""ID Generation Utilities"""
import secrets
import time
import uuid
from datetime import datetime, timezone
from typing import Optional


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Generate a unique ID with optional prefix

    Args:
        prefix: Optional prefix for the ID (e.g., 'APP', 'DOC', 'PQ')

    Returns:
        Unique ID string

    Examples:
        >>> generate_id('APP')
        'APP-a1b2c3d4e5f6'
        >>> generate_id()
        'a1b2c3d4e5f6'
    """
    unique_part = uuid.uuid4().hex[:12]

    if prefix:
        return f"{prefix}-{unique_part}"
    return unique_part


def generate_application_id() -> str:
    """Generate application ID"""
    return generate_id("APP")


def generate_document_id() -> str:
    """Generate issued document ID"""
    return generate_id("DOC")


def generate_upload_id() -> str:
    """Generate uploaded document ID"""
    return generate_id("UPL")


def generate_queue_id() -> str:
    """Generate print queue item ID"""
    return generate_id("PQ")


def generate_notification_id() -> str:
    """Generate notification ID"""
    return generate_id("NTF")


def generate_admin_log_id() -> str:
    """Generate admin log entry ID"""
    return generate_id("LOG")


def generate_random_suffix() -> str:
    """Six random digits, zero padded"""
    return f"{secrets.randbelow(1_000_000):06d}"


def generate_document_number(prefix: str, random_suffix: Optional[str] = None) -> str:
    """
    Generate an issued document number

    Format is ``<prefix>-<last 6 digits of epoch ms>-<6 random digits>``.
    Uniqueness is probabilistic. The unique index on
    ``documents.document_number`` rejects a collision, which then shows up
    as an ``issue_document`` warning on the approval.

    Examples:
        >>> generate_document_number('PA', '004217')
        'PA-512345-004217'
    """
    timestamp_part = str(int(time.time() * 1000))[-6:]
    return f"{prefix}-{timestamp_part}-{random_suffix or generate_random_suffix()}"


def generate_verification_code(
    base_url: str,
    document_type: str,
    application_id: str,
    random_suffix: Optional[str] = None
) -> str:
    """Build the reference embedded in a document's scannable code"""
    suffix = random_suffix or generate_random_suffix()
    return f"{base_url.rstrip('/')}/{document_type}/{application_id}/{suffix}"


def generate_correlation_id() -> str:
    """
    Generate a correlation ID for request tracing

    Returns:
        Correlation ID string with timestamp prefix
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"
