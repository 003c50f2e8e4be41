"""
Database initialisation: creates the admins, customers, events and tickets
collections with their validation constraints and indexes, then seeds the
default administrator.

Run:
    python init_db.py                          # guarded, safe to re-run
    python init_db.py --strict                 # fail if anything already exists
    python init_db.py --check                  # only report what is missing
    python init_db.py --rotate-admin-password  # issue a new admin password
"""

import argparse
import logging
import os
import sys

# Make the app package importable when run from the repository root
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.bootstrap import bootstrap, rotate_admin_password, verify_schema
from app.config import settings
from app.database import build_engine


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Initialise the ticket management database")
    parser.add_argument("--database-url", default=None, help="defaults to DATABASE_URL")
    parser.add_argument("--strict", action="store_true",
                        help="treat existing collections or seed admin as an error")
    parser.add_argument("--check", action="store_true",
                        help="only verify the schema, exit 1 if anything is missing")
    parser.add_argument("--rotate-admin-password", action="store_true",
                        help="replace the admin password and print the new one")
    parser.add_argument("--username", default=None, help="admin to rotate (defaults to ADMIN_USERNAME)")
    parser.add_argument("--new-password", default=None, help="new password (generated when omitted)")
    return parser.parse_args(argv)


def run_check(engine) -> int:
    problems = verify_schema(engine)
    if not problems:
        print("✅ Database schema is complete")
        return 0

    print("⚠️ Database schema is incomplete:")
    for problem in problems:
        print(f"   - {problem}")
    return 1


def run_rotation(engine, args) -> int:
    username = args.username or settings.ADMIN_USERNAME
    password = rotate_admin_password(engine, username, args.new_password, settings=settings)
    print(f"✅ Password rotated for {username}")
    if not args.new_password:
        print(f"   New password: {password}")
    return 0


def run_bootstrap(engine, args) -> int:
    report = bootstrap(engine, settings=settings, skip_existing=not args.strict)

    print(f"   Collections created: {', '.join(report.created_collections) or 'none'}")
    if report.existing_collections:
        print(f"   Collections already present: {', '.join(report.existing_collections)}")
    print(f"   Indexes created: {len(report.created_indexes)}")

    if report.admin_created:
        print(f"   Default admin created. Username: {settings.ADMIN_USERNAME}")
        if report.generated_password:
            print(f"   Generated password: {report.generated_password}")
            print("   Change it after the first login (init_db.py --rotate-admin-password)")
    else:
        print("   Default admin already present")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    engine = build_engine(args.database_url or settings.DATABASE_URL)

    try:
        if args.check:
            return run_check(engine)
        if args.rotate_admin_password:
            return run_rotation(engine, args)

        print("🚀 Initialising ticket management database")
        print("=" * 50)
        code = run_bootstrap(engine, args)
        print("=" * 50)
        print("✅ Database initialisation completed")
        return code

    except Exception as e:
        print(f"❌ Database initialisation failed: {e}")
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
