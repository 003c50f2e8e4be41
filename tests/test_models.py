"""
Write-time enforcement of the collection schemas against a real database
"""
import pytest
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError

from app.models import Admin, Customer, Event, Ticket
from app.validation import DocumentValidationError
from conftest import make_admin, make_customer, make_event, make_ticket

MODELS = {
    "admins": (Admin, make_admin),
    "customers": (Customer, make_customer),
    "events": (Event, make_event),
    "tickets": (Ticket, make_ticket),
}

REQUIRED = [
    ("admins", "username"),
    ("customers", "full_name"),
    ("events", "ticket_limit"),
    ("tickets", "qr_code_data"),
]

WRONG_TYPE = [
    ("admins", "email", 12345),
    ("customers", "phone_number", 5551234),
    ("events", "event_date", "next friday"),
    ("tickets", "event_id", "evt-1"),
]


def add(session, collection, **overrides):
    model, factory = MODELS[collection]
    obj = model(**factory(**overrides))
    session.add(obj)
    session.commit()
    return obj


@pytest.mark.integration
@pytest.mark.parametrize("collection", sorted(MODELS))
def test_valid_document_is_stored(db_session, collection):
    obj = add(db_session, collection)
    assert obj.id is not None
    assert obj.created_at is not None


@pytest.mark.integration
@pytest.mark.parametrize("collection,field", REQUIRED)
def test_missing_required_field_is_rejected_on_insert(db_session, collection, field):
    model, factory = MODELS[collection]
    doc = factory()
    del doc[field]
    db_session.add(model(**doc))

    with pytest.raises(DocumentValidationError):
        db_session.commit()
    db_session.rollback()

    seeded = 1 if collection == "admins" else 0
    assert db_session.query(model).count() == seeded


@pytest.mark.integration
@pytest.mark.parametrize("collection,field,value", WRONG_TYPE)
def test_wrong_type_is_rejected_on_insert(db_session, collection, field, value):
    with pytest.raises(DocumentValidationError):
        add(db_session, collection, **{field: value})
    db_session.rollback()


@pytest.mark.integration
@pytest.mark.parametrize("limit", [0, -5])
def test_non_positive_ticket_limit_is_rejected(db_session, limit):
    with pytest.raises(DocumentValidationError):
        add(db_session, "events", ticket_limit=limit)
    db_session.rollback()


@pytest.mark.integration
def test_update_is_validated(db_session):
    event = add(db_session, "events")

    event.ticket_limit = 0
    with pytest.raises(DocumentValidationError):
        db_session.commit()
    db_session.rollback()

    event.ticket_limit = 250
    db_session.commit()
    assert db_session.get(Event, event.id).ticket_limit == 250


@pytest.mark.integration
def test_duplicate_admin_username_is_rejected(db_session):
    add(db_session, "admins", username="operator")

    with pytest.raises(IntegrityError):
        add(db_session, "admins", username="operator")
    db_session.rollback()


@pytest.mark.integration
def test_admin_email_is_unique_only_when_present(db_session):
    add(db_session, "admins", username="first", email=None)
    add(db_session, "admins", username="second", email=None)
    add(db_session, "admins", username="third", email="ops@example.com")

    with pytest.raises(IntegrityError):
        add(db_session, "admins", username="fourth", email="ops@example.com")
    db_session.rollback()


@pytest.mark.integration
def test_duplicate_customer_email_is_rejected(db_session):
    add(db_session, "customers", email="jane@example.com")

    with pytest.raises(IntegrityError):
        add(db_session, "customers", email="jane@example.com", full_name="Other Jane")
    db_session.rollback()


@pytest.mark.integration
def test_duplicate_qr_code_data_is_rejected(db_session):
    add(db_session, "tickets", customer_id=1, event_id=1, qr_code_data="QR-SAME")

    with pytest.raises(IntegrityError):
        add(db_session, "tickets", customer_id=2, event_id=1, qr_code_data="QR-SAME")
    db_session.rollback()


@pytest.mark.integration
def test_duplicate_customer_event_pair_is_rejected(db_session):
    add(db_session, "tickets", customer_id=1, event_id=1, qr_code_data="QR-A")
    add(db_session, "tickets", customer_id=1, event_id=2, qr_code_data="QR-B")
    add(db_session, "tickets", customer_id=2, event_id=1, qr_code_data="QR-C")

    with pytest.raises(IntegrityError):
        add(db_session, "tickets", customer_id=1, event_id=1, qr_code_data="QR-D")
    db_session.rollback()


@pytest.mark.integration
def test_ticket_references_are_not_checked_for_existence(db_session):
    ticket = add(db_session, "tickets", customer_id=9999, event_id=8888)
    assert ticket.id is not None


@pytest.mark.integration
def test_database_constraints_reject_raw_inserts(bootstrapped_engine):
    with bootstrapped_engine.connect() as conn:
        with pytest.raises(IntegrityError):
            conn.execute(insert(Customer.__table__).values(email="x@example.com", password_hash="h"))
        conn.rollback()

        with pytest.raises(IntegrityError):
            conn.execute(insert(Event.__table__).values(**make_event(ticket_limit=0)))
        conn.rollback()

        with pytest.raises(IntegrityError):
            conn.execute(insert(Admin.__table__).values(**make_admin(role="owner")))
        conn.rollback()

        with pytest.raises(IntegrityError):
            conn.execute(insert(Ticket.__table__).values(**make_ticket(payment_status="refunded")))
        conn.rollback()


@pytest.mark.integration
def test_in_place_image_edits_are_persisted(db_session):
    event = add(db_session, "events", images=["a.png"])

    event.images.append("b.png")
    db_session.commit()
    db_session.expire_all()

    assert db_session.get(Event, event.id).images == ["a.png", "b.png"]


@pytest.mark.integration
def test_in_place_image_edits_are_validated(db_session):
    event = add(db_session, "events", images=["a.png"])

    event.images.append(3)
    with pytest.raises(DocumentValidationError):
        db_session.commit()
    db_session.rollback()

    assert db_session.get(Event, event.id).images == ["a.png"]
