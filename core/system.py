from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Union

from attendance.aggregator import HoursAggregator
from attendance.dynamodb_store import DynamoDBEventStore
from attendance.ingestion import Clock, EventIngestion, utc_now
from attendance.memory_store import InMemoryEventStore
from attendance.projector import StateProjector
from attendance.store import EventStore
from configs.settings import Settings
from core.errors import SubjectNotFound
from core.timesheet import RangeReport, Timesheet, TimesheetAssembler
from embeddings.manager import Gallery, GalleryManager, InMemoryGallery
from embeddings.models import EnrolledIdentity, Role
from recognition.face_matcher import FaceMatcher

logger = logging.getLogger(__name__)


class TimeclockSystem:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[EventStore] = None,
        gallery: Optional[Gallery] = None,
        clock: Clock = utc_now,
    ) -> None:
        """
        Wire the timeclock components together.

        Args:
            settings: Runtime settings; defaults to Settings()
            store: Event store; built from settings.storage_backend if omitted
            gallery: Enrolled identities; built from settings.storage_backend if omitted
            clock: Callable returning the current aware datetime
        """
        self.settings = settings or Settings()

        backend = self.settings.storage_backend
        if backend not in {"memory", "dynamodb"}:
            raise ValueError(f"Unsupported storage_backend: {backend}")

        if store is None:
            if backend == "dynamodb":
                store = DynamoDBEventStore(
                    table_name=self.settings.events_table, region=self.settings.aws_region
                )
            else:
                store = InMemoryEventStore()
        if gallery is None:
            if backend == "dynamodb":
                gallery = GalleryManager(
                    table_name=self.settings.identities_table, region=self.settings.aws_region
                )
            else:
                gallery = InMemoryGallery()

        self.store: EventStore = store
        self.gallery: Gallery = gallery
        self.clock = clock
        self.matcher = FaceMatcher(threshold=self.settings.match_threshold)
        self.ingestion = EventIngestion(self.store, clock=clock)
        self.projector = StateProjector(self.store)
        self.aggregator = HoursAggregator(self.store, tz=self.settings.tzinfo)
        self.assembler = TimesheetAssembler(
            self.projector,
            self.aggregator,
            first_weekday=self.settings.first_day_of_week,
            clock=clock,
        )

    def enroll(
        self,
        subject_id: str,
        template: Optional[Iterable[float]] = None,
        role: Union[Role, str] = Role.WORKER,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> EnrolledIdentity:
        return self.gallery.enroll(subject_id, role=role, template=template, name=name, email=email)

    def authenticate_by_face(self, probe: Iterable[float]) -> str:
        subject_id = self.matcher.resolve(probe, self.gallery.load())
        logger.info("Authenticated subject %s by face", subject_id)
        return subject_id

    def get_identity(self, subject_id: str) -> EnrolledIdentity:
        identity = self.gallery.get(subject_id)
        if identity is None:
            raise SubjectNotFound(f"Unknown subject '{subject_id}'")
        return identity

    # Ledger reads and writes only happen for enrolled subjects.

    def record_punch(self, subject_id: str, action: str) -> Timesheet:
        self.get_identity(subject_id)
        self.ingestion.record_punch(subject_id, action)
        return self.assembler.assemble(subject_id)

    def record_break(self, subject_id: str, action: str) -> Timesheet:
        self.get_identity(subject_id)
        self.ingestion.record_break(subject_id, action)
        return self.assembler.assemble(subject_id)

    def get_state(self, subject_id: str) -> Timesheet:
        self.get_identity(subject_id)
        return self.assembler.assemble(subject_id)

    def get_range(self, subject_id: str, start: date, end: date) -> RangeReport:
        self.get_identity(subject_id)
        return self.assembler.assemble_range(subject_id, start, end)
