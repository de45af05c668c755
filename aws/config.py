from __future__ import annotations

import os

AWS_REGION = os.getenv("AWS_REGION", "eu-north-1")
EVENTS_TABLE = os.getenv("EVENTS_TABLE", "AttendanceEvents")
IDENTITIES_TABLE = os.getenv("IDENTITIES_TABLE", "Identities")


def get_boto3_session_kwargs(region: str | None = None) -> dict:
    """
    Provide common keyword arguments when instantiating boto3 clients/resources.
    Currently only region, but hook for future credentials/profile injection.
    """
    return {"region_name": region or AWS_REGION}
