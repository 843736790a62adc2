#!/usr/bin/env python
# ============================================================================
# SCHEMA DEPLOYMENT SCRIPT
# ============================================================================
# EPOCH: 1 - BOUNCE COORDINATION
# PURPOSE: Deploy the bounce schema to PostgreSQL
# USAGE:
#   python scripts/deploy_schema.py --dry-run    # Preview SQL
#   python scripts/deploy_schema.py              # Execute deployment
# ============================================================================

import argparse
import asyncio
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.logging import configure_logging
from repositories import DatabasePool, deploy_schema
from repositories.database import SCHEMA, get_connection_string, _safe_conninfo
from repositories.schema import build_statements


async def _deploy(connection_string: str) -> int:
    async with DatabasePool(min_size=1, max_size=1, connection_string=connection_string) as pool:
        return await deploy_schema(pool)


def main():
    parser = argparse.ArgumentParser(
        description="Deploy bounce schema to PostgreSQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deploy_schema.py --dry-run     # Preview DDL without executing
  python scripts/deploy_schema.py               # Deploy schema

Environment Variables:
  DATABASE_URL          Full PostgreSQL connection string
  POSTGRES_HOST         Database host (default: localhost)
  POSTGRES_DB           Database name (default: postgres)
  POSTGRES_USER         Database user (default: postgres)
  POSTGRES_PASSWORD     Database password
  POSTGRES_PORT         Database port (default: 5432)
  BOUNCE_DB_SCHEMA      Schema name (default: bounce)
        """
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print DDL without executing"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else "INFO")

    print("=" * 70)
    print("BOUNCE COORDINATOR - Schema Deployment")
    print("=" * 70)
    print(f"Schema: {SCHEMA}")

    if args.dry_run:
        print("Mode: DRY RUN\n")
        for statement in build_statements():
            print(statement.as_string(None).strip() + ";\n")
        return

    connection_string = args.connection or get_connection_string()
    print(f"Target: {_safe_conninfo(connection_string)}")
    print("=" * 70)

    try:
        count = asyncio.run(_deploy(connection_string))
    except Exception as e:
        print(f"Deployment failed: {e}")
        sys.exit(1)

    print(f"Deployment completed ({count} statements)")
    print("=" * 70)


if __name__ == "__main__":
    main()
