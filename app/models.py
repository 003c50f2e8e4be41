from sqlalchemy import (
    Column, Integer, String, DateTime, Text, JSON, Index, CheckConstraint,
    event, func, inspect, literal_column,
)
from sqlalchemy.ext.mutable import MutableList
from app.database import Base
from app.validation import (
    ADMIN_ROLES, PAYMENT_STATUSES, CHECK_IN_STATUSES, validate_document,
)


def _in_clause(column: str, values) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200))
    email = Column(String(200))
    role = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(_in_clause("role", ADMIN_ROLES), name="ck_admins_role"),
        Index("ix_admins_username", "username", unique=True),
        # NULL emails never collide, so admins without an email are allowed
        Index("ix_admins_email", "email", unique=True),
    )


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    email = Column(String(200), nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    phone_number = Column(String(50))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_customers_email", "email", unique=True),
    )


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    event_name = Column(String(200), nullable=False)
    event_date = Column(DateTime(timezone=True), nullable=False)
    description = Column(Text)
    ticket_limit = Column(Integer, nullable=False)
    # MutableList so in-place edits (append, remove) are flushed and validated
    images = Column(MutableList.as_mutable(JSON))  # list of image URLs

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("ticket_limit >= 1", name="ck_events_ticket_limit"),
        Index("ix_events_event_date", "event_date"),
    )


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True)
    # References are checked for shape only; there is no FOREIGN KEY
    customer_id = Column(Integer, nullable=False)
    event_id = Column(Integer, nullable=False)
    qr_code_data = Column(String(500), nullable=False)
    payment_status = Column(String(20), nullable=False)
    check_in_status = Column(String(20), nullable=False)
    checked_in_at = Column(DateTime(timezone=True))
    checked_in_by = Column(Integer)  # admin id

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(_in_clause("payment_status", PAYMENT_STATUSES), name="ck_tickets_payment_status"),
        CheckConstraint(_in_clause("check_in_status", CHECK_IN_STATUSES), name="ck_tickets_check_in_status"),
        Index("ix_tickets_customer_id", "customer_id"),
        Index("ix_tickets_event_id", "event_id"),
        Index("ix_tickets_qr_code_data", "qr_code_data", unique=True),
        Index("ix_tickets_check_in_status", "check_in_status"),
        Index("ix_tickets_customer_event", "customer_id", "event_id", unique=True),
    )


# Full-text search indexes exist only on PostgreSQL (GIN over tsvector)
POSTGRES_ONLY_INDEXES = set()


def _postgres_search_index(name: str, expression) -> Index:
    index = Index(name, func.to_tsvector(literal_column("'english'"), expression), postgresql_using="gin")
    index.ddl_if(dialect="postgresql")
    POSTGRES_ONLY_INDEXES.add(name)
    return index


_postgres_search_index("ix_customers_full_name_fts", Customer.full_name)
_postgres_search_index(
    "ix_events_search_fts",
    func.coalesce(Event.event_name, "") + " " + func.coalesce(Event.description, ""),
)

COLLECTION_MODELS = (Admin, Customer, Event, Ticket)


def index_applies(index: Index, dialect_name: str) -> bool:
    return index.name not in POSTGRES_ONLY_INDEXES or dialect_name == "postgresql"


def _validate_insert(mapper, connection, target):
    validate_document(target.__tablename__, dict(inspect(target).dict))


def _validate_update(mapper, connection, target):
    # Only loaded attributes are visible here; unloaded ones are left as stored
    validate_document(target.__tablename__, dict(inspect(target).dict), partial=True)


for _model in COLLECTION_MODELS:
    event.listen(_model, "before_insert", _validate_insert)
    event.listen(_model, "before_update", _validate_update)
