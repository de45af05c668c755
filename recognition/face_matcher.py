from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from core.errors import InvalidFeatureVector, NoEnrolledIdentities, NoMatch
from embeddings.models import EnrolledIdentity, Role

logger = logging.getLogger(__name__)

VECTOR_LENGTH = 128
DEFAULT_THRESHOLD = 0.6


def to_feature_vector(values: Iterable[float]) -> np.ndarray:
    """
    Validate raw descriptor values and freeze them into a feature vector.

    Raises InvalidFeatureVector for anything that is not exactly 128 finite
    numbers.
    """
    try:
        vector = np.array(list(values), dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidFeatureVector("Feature vector must contain only numbers") from exc

    if vector.ndim != 1 or vector.shape[0] != VECTOR_LENGTH:
        raise InvalidFeatureVector(
            f"Feature vector must have {VECTOR_LENGTH} components, got shape {vector.shape}"
        )
    if not np.all(np.isfinite(vector)):
        raise InvalidFeatureVector("Feature vector contains non-finite values")

    vector.setflags(write=False)
    return vector


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(a - b))


class FaceMatcher:
    """Nearest-neighbour identification over enrolled worker templates."""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD) -> None:
        if not threshold > 0 or not math.isfinite(threshold):
            raise ValueError("threshold must be a positive finite number")
        self.threshold = threshold

    def best_match(
        self, probe: np.ndarray, gallery: Sequence[EnrolledIdentity]
    ) -> Tuple[Optional[str], float]:
        """
        Return the closest template owner and its distance, without applying
        the threshold. Ties keep the first identity encountered.
        """
        best_id: Optional[str] = None
        best_dist = math.inf
        for identity in gallery:
            if identity.role != Role.WORKER or not identity.has_template:
                continue
            template = identity.template
            if template.shape != probe.shape or not np.all(np.isfinite(template)):
                logger.warning("Skipping malformed template for subject %s", identity.subject_id)
                continue
            distance = euclidean_distance(probe, template)
            if distance < best_dist:
                best_id, best_dist = identity.subject_id, distance
        return best_id, best_dist

    def resolve(self, probe: Iterable[float], gallery: Sequence[EnrolledIdentity]) -> str:
        vector = to_feature_vector(probe)
        if not gallery:
            raise NoEnrolledIdentities("No enrolled identities to match against")

        subject_id, distance = self.best_match(vector, gallery)
        if subject_id is None:
            raise NoEnrolledIdentities("No enrolled worker templates to match against")

        if distance < self.threshold:
            logger.debug("Face matched subject %s (distance=%.4f)", subject_id, distance)
            return subject_id

        logger.info("Face not recognized")
        raise NoMatch("Face not recognized")
