"""
DynamoDB table management for the site timeclock.

Two tables back the system: the append-only attendance events table and the
enrolled identities table.
"""

from __future__ import annotations

from typing import Dict, List

import boto3
from botocore.exceptions import ClientError

from aws.config import EVENTS_TABLE, IDENTITIES_TABLE, get_boto3_session_kwargs

TABLE_SCHEMAS: Dict[str, Dict[str, List[dict]]] = {
    "events": {
        "KeySchema": [
            {"AttributeName": "subject_id", "KeyType": "HASH"},
            {"AttributeName": "event_key", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "subject_id", "AttributeType": "S"},
            {"AttributeName": "event_key", "AttributeType": "S"},
        ],
    },
    "identities": {
        "KeySchema": [
            {"AttributeName": "subject_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "subject_id", "AttributeType": "S"},
        ],
    },
}


def create_table(table_name: str, schema: str, region: str | None = None) -> dict:
    """
    Create a timeclock table if it doesn't exist.

    Args:
        table_name: Name of the table to create
        schema: Key of TABLE_SCHEMAS ("events" or "identities")
        region: AWS region

    Returns:
        Dictionary with table creation status
    """
    dynamodb = boto3.resource("dynamodb", **get_boto3_session_kwargs(region))

    try:
        table = dynamodb.Table(table_name)
        table.load()
        return {
            "status": "exists",
            "message": f"Table '{table_name}' already exists",
            "table_name": table_name,
        }
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceNotFoundException":
            return {"status": "error", "message": str(e), "table_name": table_name}

    try:
        table = dynamodb.create_table(
            TableName=table_name,
            BillingMode="PAY_PER_REQUEST",
            Tags=[{"Key": "Application", "Value": "SiteTimeclock"}],
            **TABLE_SCHEMAS[schema],
        )
        table.wait_until_exists()
    except ClientError as create_error:
        return {"status": "error", "message": str(create_error), "table_name": table_name}

    return {
        "status": "created",
        "message": f"Table '{table_name}' created successfully",
        "table_name": table_name,
    }


def create_timeclock_tables(
    events_table: str = EVENTS_TABLE,
    identities_table: str = IDENTITIES_TABLE,
    region: str | None = None,
) -> List[dict]:
    return [
        create_table(events_table, "events", region),
        create_table(identities_table, "identities", region),
    ]


def delete_table(table_name: str, region: str | None = None) -> dict:
    """
    Delete a timeclock table.

    WARNING: This will permanently delete all attendance data!
    """
    dynamodb = boto3.resource("dynamodb", **get_boto3_session_kwargs(region))

    try:
        table = dynamodb.Table(table_name)
        table.delete()
        table.wait_until_not_exists()
        return {
            "status": "deleted",
            "message": f"Table '{table_name}' deleted successfully",
            "table_name": table_name,
        }
    except ClientError as e:
        return {"status": "error", "message": str(e), "table_name": table_name}


def get_table_info(table_name: str, region: str | None = None) -> dict:
    dynamodb = boto3.resource("dynamodb", **get_boto3_session_kwargs(region))

    try:
        table = dynamodb.Table(table_name)
        table.load()
        return {
            "status": "success",
            "table_name": table.name,
            "item_count": table.item_count,
            "table_status": table.table_status,
            "table_size_bytes": table.table_size_bytes,
            "arn": table.table_arn,
        }
    except ClientError as e:
        return {"status": "error", "message": str(e), "table_name": table_name}
