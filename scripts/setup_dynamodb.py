#!/usr/bin/env python3
"""
Create the DynamoDB tables used by the site timeclock.

Usage:
    python scripts/setup_dynamodb.py [--reset]

--reset drops both tables first. This permanently deletes all attendance data.
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from configs.dynamodb_config import create_timeclock_tables, delete_table, get_table_info
from configs.settings import Settings


def main(argv=None):
    """Set up DynamoDB for the site timeclock."""
    parser = argparse.ArgumentParser(description="Create the site timeclock DynamoDB tables")
    parser.add_argument("--reset", action="store_true", help="delete existing tables first")
    args = parser.parse_args(argv)

    settings = Settings.from_env()

    print("Setting up DynamoDB for Site Timeclock")
    print(f"   Region: {settings.aws_region}")
    print(f"   Tables: {settings.events_table}, {settings.identities_table}")
    print()

    if args.reset:
        for table_name in (settings.events_table, settings.identities_table):
            result = delete_table(table_name=table_name, region=settings.aws_region)
            if result["status"] == "error" and "ResourceNotFoundException" not in result["message"]:
                print(f"Error: {result['message']}")
                sys.exit(1)
            print(result["message"])
        print()

    results = create_timeclock_tables(
        events_table=settings.events_table,
        identities_table=settings.identities_table,
        region=settings.aws_region,
    )
    for result in results:
        if result["status"] == "error":
            print(f"Error: {result['message']}")
            sys.exit(1)
        print(result["message"])

    print()
    for table_name in (settings.events_table, settings.identities_table):
        info = get_table_info(table_name=table_name, region=settings.aws_region)
        if info["status"] != "success":
            print(f"Error getting table info: {info['message']}")
            sys.exit(1)
        print(f"Table {info['table_name']}:")
        print(f"   Status: {info['table_status']}")
        print(f"   Item Count: {info['item_count']}")
        print(f"   Size: {info['table_size_bytes']} bytes")
        print(f"   ARN: {info['arn']}")

    print()
    print("DynamoDB setup complete!")


if __name__ == "__main__":
    main()
