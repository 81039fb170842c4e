"""
Seed Data Script - Creates the service catalog and sample holders
Run: python -m scripts.seed_data
"""
from portal.domain.catalog import DOCUMENT_TYPE_RULES
from portal.domain.enums import DocumentType
from portal.domain.models import Service, UserProfile
from portal.repositories.mongo_client import create_indexes
from portal.repositories.catalog_repo import CatalogRepository


SERVICE_DETAILS = {
    DocumentType.PASSPORT: {
        "description": "Apply for a new passport or renew an expired one",
        "fee": 150.0,
        "processing_time": "10 business days",
        "required_documents": ["national_id", "photo"],
    },
    DocumentType.NATIONAL_ID: {
        "description": "Issue or renew your national identity card",
        "fee": 25.0,
        "processing_time": "5 business days",
        "required_documents": ["birth_certificate", "photo"],
    },
    DocumentType.BIRTH_CERTIFICATE: {
        "description": "Request an official copy of your birth certificate",
        "fee": 10.0,
        "processing_time": "3 business days",
        "required_documents": ["application_form"],
    },
    DocumentType.DRIVER_LICENSE: {
        "description": "Issue or renew a driver license",
        "fee": 60.0,
        "processing_time": "7 business days",
        "required_documents": ["national_id", "photo", "application_form"],
    },
}

SAMPLE_USERS = [
    UserProfile(holder_id="10000000001", full_name="Layla Haddad", phone_number="+962790000001"),
    UserProfile(holder_id="10000000002", full_name="Omar Saleh", phone_number="+962790000002"),
]


def seed_catalog(repo: CatalogRepository) -> None:
    """Create one service per document type"""
    if repo.list_services(active_only=False):
        print("Service catalog already seeded. Skipping.")
        return

    for document_type, rule in DOCUMENT_TYPE_RULES.items():
        service = Service(
            service_id=rule.service_id,
            service_name=rule.display_name,
            is_active=True,
            **SERVICE_DETAILS[document_type]
        )
        repo.add_service(service)
        print(f"Created service {service.service_id}: {service.service_name}")


def seed_users(repo: CatalogRepository) -> None:
    for user in SAMPLE_USERS:
        if repo.get_user(user.holder_id):
            continue
        repo.add_user(user)
        print(f"Created holder profile: {user.full_name}")


def main():
    print("=== Seeding database ===")
    print("-" * 40)

    create_indexes()

    repo = CatalogRepository()
    seed_catalog(repo)
    seed_users(repo)

    print("-" * 40)
    print("Done!")


if __name__ == "__main__":
    main()
