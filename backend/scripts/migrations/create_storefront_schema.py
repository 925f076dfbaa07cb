#!/usr/bin/env python3
"""
Script: create_storefront_schema.py
Purpose: Create the products and orders tables used by the storefront API

Usage:
    cd backend && source venv/bin/activate
    python scripts/migrations/create_storefront_schema.py [--dry-run]

Options:
    --dry-run    Print the statements without executing them
"""
import argparse
import sys
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()

from storefront.core.database import get_db_connection

STATEMENTS = [
    ("pgcrypto extension", "CREATE EXTENSION IF NOT EXISTS pgcrypto"),
    ("products table", """
        CREATE TABLE IF NOT EXISTS products (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            description TEXT NOT NULL,
            price NUMERIC NOT NULL CHECK (price >= 0),
            category TEXT NOT NULL,
            quantity INTEGER NOT NULL CHECK (quantity >= 0),
            shipping BOOLEAN NOT NULL DEFAULT FALSE,
            photo BYTEA,
            photo_content_type TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ
        )
    """),
    ("products category index", "CREATE INDEX IF NOT EXISTS idx_products_category ON products (category)"),
    ("orders table", """
        CREATE TABLE IF NOT EXISTS orders (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            products JSONB NOT NULL DEFAULT '[]'::jsonb,
            payment JSONB NOT NULL DEFAULT '{}'::jsonb,
            buyer TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'Not Process',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """),
    ("orders buyer index", "CREATE INDEX IF NOT EXISTS idx_orders_buyer ON orders (buyer, created_at DESC)"),
]


def print_header(title: str):
    """Print formatted header"""
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def main():
    parser = argparse.ArgumentParser(description='Create storefront tables')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be done without making changes')
    args = parser.parse_args()

    print_header("Storefront schema")
    print(f"Timestamp: {datetime.now().isoformat()}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'EXECUTE'}")

    if args.dry_run:
        for description, statement in STATEMENTS:
            print(f"\n-- {description}\n{statement.strip()};")
        return

    try:
        conn = get_db_connection()
    except Exception as e:
        print(f"\nERROR: {e}")
        sys.exit(1)

    cursor = conn.cursor()
    try:
        for description, statement in STATEMENTS:
            print(f"  Creating {description}")
            cursor.execute(statement)
        conn.commit()
        print("\nDone.")
    except Exception as e:
        conn.rollback()
        print(f"\nERROR: {e}")
        sys.exit(1)
    finally:
        cursor.close()
        conn.close()


if __name__ == '__main__':
    main()
