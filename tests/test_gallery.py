from decimal import Decimal

import boto3
import pytest
from botocore.stub import Stubber

from conftest import make_vector
from core.errors import DuplicateSubject, InvalidFeatureVector, StoreUnavailable
from embeddings.manager import GalleryManager, InMemoryGallery
from embeddings.models import Role


def test_in_memory_enroll_and_load():
    gallery = InMemoryGallery()
    gallery.enroll("w1", template=make_vector(1), name="Ana")
    gallery.enroll("boss", role="ADMIN", email="boss@example.com")

    assert [i.subject_id for i in gallery.load()] == ["w1", "boss"]
    assert gallery.get("boss").role == Role.ADMIN
    assert gallery.get("boss").template is None
    assert gallery.get("missing") is None
    assert len(gallery.load()) == 2


def test_enroll_validates_template():
    with pytest.raises(InvalidFeatureVector):
        InMemoryGallery().enroll("w1", template=[0.1] * 3)


@pytest.fixture
def dynamo_gallery(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    gallery = GalleryManager(table_name="Identities", region="us-east-1")
    with Stubber(gallery.table.meta.client) as stubber:
        yield gallery, stubber


def test_dynamodb_load_skips_malformed_items(dynamo_gallery):
    gallery, stubber = dynamo_gallery
    good = [{"N": str(Decimal(str(v)))} for v in make_vector(1)]
    stubber.add_response(
        "scan",
        {
            "Items": [
                {"subject_id": {"S": "w1"}, "role": {"S": "WORKER"}, "embedding": {"L": good}},
                {"subject_id": {"S": "w2"}, "role": {"S": "WORKER"}, "embedding": {"L": good[:5]}},
                {"subject_id": {"S": "w3"}, "role": {"S": "WORKER"}},
                {"subject_id": {"S": "boss"}, "role": {"S": "ADMIN"}},
            ]
        },
    )

    identities = gallery.load()
    assert [i.subject_id for i in identities] == ["w1", "boss"]
    assert identities[0].template.shape == (128,)


def test_dynamodb_duplicate_enrollment(dynamo_gallery):
    gallery, stubber = dynamo_gallery
    stubber.add_client_error("put_item", service_error_code="ConditionalCheckFailedException")
    with pytest.raises(DuplicateSubject):
        gallery.enroll("w1", template=make_vector(1))


def test_dynamodb_scan_failure(dynamo_gallery):
    gallery, stubber = dynamo_gallery
    stubber.add_client_error("scan", service_error_code="InternalServerError")
    with pytest.raises(StoreUnavailable):
        gallery.load()
