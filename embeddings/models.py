from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


class Role(str, Enum):
    WORKER = "WORKER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class EnrolledIdentity:
    """
    A subject known to the timeclock.

    Workers carry exactly one template captured at enrollment; admins
    authenticate by password elsewhere and may have none.
    """

    subject_id: str
    role: Role
    template: Optional[np.ndarray] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def has_template(self) -> bool:
        return self.template is not None
