"""
Pytest Configuration and Fixtures

Every test gets a fresh in-memory MongoDB (mongomock) behind the real
MongoDataStore. Environment is set before ``portal`` is imported because
settings are read once at import time.
"""

import os
import tempfile

os.environ.setdefault("LOGS_PATH", tempfile.mkdtemp(prefix="portal-logs-"))
os.environ["DOCUMENT_STATUS_URL"] = ""
os.environ["VERIFICATION_BASE_URL"] = "https://verify.test"

import mongomock
import pytest

from portal.repositories.data_store import MongoDataStore
from portal.repositories.mongo_client import create_indexes
from portal.repositories.catalog_repo import CatalogRepository
from scripts.seed_data import seed_catalog, seed_users


@pytest.fixture
def store():
    """Empty data store"""
    return MongoDataStore(mongomock.MongoClient()["portal_test"])


@pytest.fixture
def seeded_store(store):
    """Data store with the service catalog and sample holders"""
    repo = CatalogRepository(store)
    seed_catalog(repo)
    seed_users(repo)
    return store


@pytest.fixture
def indexed_store():
    """Seeded data store carrying the production indexes (unique keys enforced)"""
    database = mongomock.MongoClient()["portal_test"]
    create_indexes(database)
    store = MongoDataStore(database)
    repo = CatalogRepository(store)
    seed_catalog(repo)
    seed_users(repo)
    return store
