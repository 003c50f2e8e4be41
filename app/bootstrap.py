"""
Database bootstrap for the ticketing schema.

Creates the four collections (tables with their validation constraints),
builds their indexes and seeds the default administrator. Steps run in
order and each one commits on its own: a failure halts the remaining steps
and leaves whatever was already done in place.

By default every step is guarded, so running the bootstrap against an
initialised database is a no-op. With skip_existing=False an existing table
or seed admin is an error, exactly like a first-run-only init script.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import inspect, or_
from sqlalchemy.orm import sessionmaker
from sqlalchemy.schema import CreateTable

from app.config import Settings, check_password_length, settings as default_settings
from app.models import Admin, COLLECTION_MODELS, index_applies
from app.security import generate_password, hash_password

logger = logging.getLogger(__name__)


class AdminNotFoundError(LookupError):
    pass


@dataclass
class BootstrapReport:
    created_collections: List[str] = field(default_factory=list)
    existing_collections: List[str] = field(default_factory=list)
    created_indexes: List[str] = field(default_factory=list)
    admin_created: bool = False
    generated_password: Optional[str] = None


def _sorted_indexes(table, dialect_name: str):
    return sorted(
        (ix for ix in table.indexes if index_applies(ix, dialect_name)),
        key=lambda ix: ix.name,
    )


def create_collections(engine, skip_existing: bool = True, report: Optional[BootstrapReport] = None) -> BootstrapReport:
    """Create every collection table with its constraints, without indexes."""
    report = report or BootstrapReport()

    for model in COLLECTION_MODELS:
        table = model.__table__
        with engine.begin() as conn:
            if skip_existing and inspect(conn).has_table(table.name):
                logger.info("Collection %s already exists, skipping", table.name)
                report.existing_collections.append(table.name)
                continue

            conn.execute(CreateTable(table))
            logger.info("Collection %s created", table.name)
            report.created_collections.append(table.name)

    return report


def build_indexes(engine, report: Optional[BootstrapReport] = None) -> BootstrapReport:
    """Build the indexes of every collection; indexes that already exist are left alone."""
    report = report or BootstrapReport()
    dialect_name = engine.dialect.name

    for model in COLLECTION_MODELS:
        table = model.__table__
        with engine.begin() as conn:
            existing = {ix["name"] for ix in inspect(conn).get_indexes(table.name)}
            for index in _sorted_indexes(table, dialect_name):
                if index.name in existing:
                    continue
                index.create(bind=conn)
                logger.info("Index %s created on %s", index.name, table.name)
                report.created_indexes.append(index.name)

    return report


def seed_default_admin(
    engine,
    settings: Settings = default_settings,
    skip_existing: bool = True,
    report: Optional[BootstrapReport] = None,
) -> BootstrapReport:
    """
    Insert the default super admin.

    The password is taken from ADMIN_PASSWORD; when it is not configured a
    random one is generated and returned in the report so it can be handed
    to the operator once and rotated.
    """
    report = report or BootstrapReport()
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = SessionLocal()
    try:
        if skip_existing:
            # A renamed seed admin still holds the seed email, which is unique too
            match = Admin.username == settings.ADMIN_USERNAME
            if settings.ADMIN_EMAIL:
                match = or_(match, Admin.email == settings.ADMIN_EMAIL)
            existing = db.query(Admin).filter(match).first()
            if existing:
                logger.info("Admin %s already exists, skipping seed", existing.username)
                return report

        password = settings.ADMIN_PASSWORD
        if not password:
            password = generate_password()
            report.generated_password = password
            logger.warning(
                "ADMIN_PASSWORD is not set, generated a random password for %s; rotate it after first login",
                settings.ADMIN_USERNAME,
            )

        now = datetime.now(timezone.utc)
        admin = Admin(
            username=settings.ADMIN_USERNAME,
            password_hash=hash_password(password, settings.BCRYPT_ROUNDS),
            full_name=settings.ADMIN_FULL_NAME,
            email=settings.ADMIN_EMAIL,
            role="super_admin",
            created_at=now,
            updated_at=now,
        )
        db.add(admin)
        db.commit()

        logger.info("Default admin %s created", settings.ADMIN_USERNAME)
        report.admin_created = True
        return report

    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def bootstrap(engine, settings: Settings = default_settings, skip_existing: bool = True) -> BootstrapReport:
    # Fail before touching the database rather than after the tables are built
    if settings.ADMIN_PASSWORD:
        check_password_length(settings.ADMIN_PASSWORD)

    report = BootstrapReport()
    create_collections(engine, skip_existing=skip_existing, report=report)
    build_indexes(engine, report=report)
    seed_default_admin(engine, settings=settings, skip_existing=skip_existing, report=report)
    return report


def verify_schema(engine) -> List[str]:
    """List what is missing from the database; an empty list means fully initialised."""
    problems = []
    inspector = inspect(engine)
    dialect_name = engine.dialect.name

    for model in COLLECTION_MODELS:
        table = model.__table__
        if not inspector.has_table(table.name):
            problems.append(f"missing collection '{table.name}'")
            continue

        existing = {ix["name"] for ix in inspector.get_indexes(table.name)}
        for index in _sorted_indexes(table, dialect_name):
            if index.name not in existing:
                problems.append(f"missing index '{index.name}' on '{table.name}'")

    return problems


def rotate_admin_password(
    engine,
    username: str,
    new_password: Optional[str] = None,
    settings: Settings = default_settings,
) -> str:
    """Replace an admin's password hash and return the new plaintext password."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    password = new_password or generate_password()
    check_password_length(password)

    db = SessionLocal()
    try:
        admin = db.query(Admin).filter(Admin.username == username).first()
        if not admin:
            raise AdminNotFoundError(f"Admin {username} not found")

        admin.password_hash = hash_password(password, settings.BCRYPT_ROUNDS)
        admin.updated_at = datetime.now(timezone.utc)
        db.commit()

        logger.info("Password rotated for admin %s", username)
        return password

    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
