from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from aws.config import IDENTITIES_TABLE, get_boto3_session_kwargs
from core.errors import DuplicateSubject, InvalidFeatureVector, InvalidInput, StoreUnavailable
from embeddings.models import EnrolledIdentity, Role
from recognition.face_matcher import to_feature_vector

logger = logging.getLogger(__name__)


class Gallery(ABC):
    """The set of enrolled identities. The matcher only ever reads it."""

    @abstractmethod
    def load(self) -> List[EnrolledIdentity]:
        ...

    @abstractmethod
    def get(self, subject_id: str) -> Optional[EnrolledIdentity]:
        ...

    @abstractmethod
    def _insert(self, identity: EnrolledIdentity) -> None:
        """Persist a new identity, raising DuplicateSubject if the id is taken."""

    def enroll(
        self,
        subject_id: str,
        role: Role = Role.WORKER,
        template: Optional[Iterable[float]] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> EnrolledIdentity:
        subject_id = (subject_id or "").strip()
        if not subject_id:
            raise InvalidInput("subject_id is required for enrollment")
        try:
            role = Role(role)
        except ValueError:
            raise InvalidInput(f"Unknown role: {role!r}") from None
        if role == Role.WORKER and template is None:
            raise InvalidInput("Workers must enroll with a face template")

        vector = to_feature_vector(template) if template is not None else None
        identity = EnrolledIdentity(
            subject_id=subject_id, role=role, template=vector, name=name, email=email
        )
        self._insert(identity)
        logger.info("Enrolled %s %s", role.value.lower(), subject_id)
        return identity


class InMemoryGallery(Gallery):
    def __init__(self, identities: Iterable[EnrolledIdentity] = ()) -> None:
        self._lock = threading.Lock()
        self._identities: Dict[str, EnrolledIdentity] = {}
        for identity in identities:
            self._insert(identity)

    def load(self) -> List[EnrolledIdentity]:
        with self._lock:
            return list(self._identities.values())

    def get(self, subject_id: str) -> Optional[EnrolledIdentity]:
        with self._lock:
            return self._identities.get(subject_id)

    def _insert(self, identity: EnrolledIdentity) -> None:
        with self._lock:
            if identity.subject_id in self._identities:
                raise DuplicateSubject(f"Subject '{identity.subject_id}' is already enrolled")
            self._identities[identity.subject_id] = identity


class GalleryManager(Gallery):
    """
    Enrolled identities stored in the DynamoDB identities table.

    Templates are kept as lists of Decimal, the only numeric type DynamoDB
    accepts through the resource API.
    """

    def __init__(self, table_name: str = IDENTITIES_TABLE, region: Optional[str] = None) -> None:
        session_kwargs = get_boto3_session_kwargs(region)
        dynamodb = boto3.resource("dynamodb", **session_kwargs)
        self.table = dynamodb.Table(table_name)

    def load(self) -> List[EnrolledIdentity]:
        """
        Load every identity into memory for the matcher. Items whose template
        cannot be parsed are skipped.
        """
        identities: List[EnrolledIdentity] = []
        for item in self._scan_identities_table():
            identity = self._from_item(item)
            if identity is not None:
                identities.append(identity)
        return identities

    def get(self, subject_id: str) -> Optional[EnrolledIdentity]:
        try:
            response = self.table.get_item(Key={"subject_id": subject_id})
        except (BotoCoreError, ClientError) as exc:
            raise StoreUnavailable(f"Failed to read identity {subject_id}: {exc}") from exc
        item = response.get("Item")
        return self._from_item(item) if item else None

    def _insert(self, identity: EnrolledIdentity) -> None:
        item = {
            "subject_id": identity.subject_id,
            "role": identity.role.value,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        if identity.template is not None:
            item["embedding"] = [Decimal(str(value)) for value in identity.template.tolist()]
        if identity.name:
            item["name"] = identity.name
        if identity.email:
            item["email"] = identity.email

        try:
            self.table.put_item(Item=item, ConditionExpression="attribute_not_exists(subject_id)")
        except ClientError as exc:
            if exc.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise DuplicateSubject(
                    f"Subject '{identity.subject_id}' is already enrolled"
                ) from exc
            raise StoreUnavailable(f"Failed to write identity: {exc}") from exc
        except BotoCoreError as exc:
            raise StoreUnavailable(f"Failed to write identity: {exc}") from exc

    def _scan_identities_table(self) -> List[dict]:
        items: List[dict] = []
        try:
            response = self.table.scan()
            items.extend(response.get("Items", []))
            while "LastEvaluatedKey" in response:
                response = self.table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
                items.extend(response.get("Items", []))
        except (BotoCoreError, ClientError) as exc:
            raise StoreUnavailable(f"Failed to scan identities: {exc}") from exc
        return items

    @staticmethod
    def _from_item(item: dict) -> Optional[EnrolledIdentity]:
        subject_id = item.get("subject_id")
        try:
            role = Role(item.get("role", Role.WORKER.value))
        except ValueError:
            logger.warning("Skipping identity %s with unknown role", subject_id)
            return None

        template = None
        embedding_data = item.get("embedding")
        if embedding_data:
            try:
                template = to_feature_vector(float(value) for value in embedding_data)
            except InvalidFeatureVector:
                logger.warning("Skipping identity %s with malformed template", subject_id)
                return None
        elif role == Role.WORKER:
            logger.warning("Skipping worker %s without embedding", subject_id)
            return None

        return EnrolledIdentity(
            subject_id=subject_id,
            role=role,
            template=template,
            name=item.get("name"),
            email=item.get("email"),
        )
