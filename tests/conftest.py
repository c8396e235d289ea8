"""
Shared fixtures.

FakeCollection mimics the part of a Motor collection the services use, so
stateful cart/order scenarios can run without MongoDB.
"""
import copy
import os
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

# Settings require a JWT secret; set one before shopcart is imported
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes")


def _matches(document: dict, query: dict) -> bool:
    return all(document.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents
    
    def sort(self, key, direction):
        self.documents.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self
    
    async def to_list(self, length=None):
        return [copy.deepcopy(d) for d in self.documents]


class FakeCollection:
    def __init__(self, unique_keys=()):
        self.documents = []
        self.unique_keys = unique_keys
    
    def with_options(self, **kwargs):
        return self
    
    async def find_one(self, query):
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None
    
    def find(self, query):
        return FakeCursor([d for d in self.documents if _matches(d, query)])
    
    async def insert_one(self, document):
        key = {k: document.get(k) for k in self.unique_keys}
        # Documents without the key are not indexed, like a partial index
        if key and any(v is not None for v in key.values()):
            if any(_matches(d, key) for d in self.documents):
                raise DuplicateKeyError(f"duplicate key: {key}")
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])
    
    async def update_one(self, query, update):
        for document in self.documents:
            if _matches(document, query):
                document.update(copy.deepcopy(update["$set"]))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)
    
    async def delete_one(self, query):
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def fake_db():
    """In-memory database with the collections and unique indexes the service uses."""
    return SimpleNamespace(
        carts=FakeCollection(unique_keys=("user_email",)),
        orders=FakeCollection(unique_keys=("cart_id",)),
        coupon_redemptions=FakeCollection(unique_keys=("user_email", "coupon_code")),
    )


def catalog_response(status_code=200, body=None):
    """Build a fake requests.Response from the product catalog."""
    response = SimpleNamespace(
        status_code=status_code,
        ok=200 <= status_code < 400,
    )
    response.json = lambda: body
    return response


@pytest.fixture
def catalog_with():
    """Factory for a requests.get replacement that knows a fixed set of products."""
    def factory(*known_ids):
        def get(url, timeout=None):
            product_id = url.rsplit("/", 1)[-1]
            if product_id in known_ids:
                return catalog_response(200, {"_id": product_id, "price": 10})
            return catalog_response(404, {"message": "Not Found"})
        return get
    return factory
