"""Document type table - the single source for per-type rules"""
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict

from .enums import DocumentType


class DocumentTypeRule(BaseModel):
    """Issuance rules for one document type"""
    model_config = ConfigDict(frozen=True)

    display_name: str
    years_valid: int
    number_prefix: str
    service_id: int


DOCUMENT_TYPE_RULES: Dict[DocumentType, DocumentTypeRule] = {
    DocumentType.PASSPORT: DocumentTypeRule(
        display_name="Passport", years_valid=10, number_prefix="PA", service_id=1
    ),
    DocumentType.NATIONAL_ID: DocumentTypeRule(
        display_name="National ID", years_valid=5, number_prefix="NA", service_id=2
    ),
    # Birth certificates do not expire; +100 years stands in for "never"
    DocumentType.BIRTH_CERTIFICATE: DocumentTypeRule(
        display_name="Birth Certificate", years_valid=100, number_prefix="BI", service_id=3
    ),
    DocumentType.DRIVER_LICENSE: DocumentTypeRule(
        display_name="Driver License", years_valid=5, number_prefix="DR", service_id=4
    ),
}

SERVICE_TO_DOCUMENT_TYPE: Dict[int, DocumentType] = {
    rule.service_id: doc_type for doc_type, rule in DOCUMENT_TYPE_RULES.items()
}


def document_type_for_service(service_id: Optional[int]) -> Optional[DocumentType]:
    """Map a catalog service id to its document type, None if unknown"""
    if service_id is None:
        return None
    return SERVICE_TO_DOCUMENT_TYPE.get(service_id)


def get_rule(document_type: DocumentType) -> DocumentTypeRule:
    """Rules for a document type"""
    return DOCUMENT_TYPE_RULES[DocumentType(document_type)]


def display_name(document_type: DocumentType) -> str:
    """Citizen-facing name of a document type"""
    return get_rule(document_type).display_name


def service_label(service_id: Optional[int]) -> str:
    """Display label for a service id"""
    document_type = document_type_for_service(service_id)
    if document_type is None:
        return f"Service #{service_id}" if service_id else "Unknown Service"
    return display_name(document_type)
