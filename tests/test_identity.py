"""
Tests for identity tokens and the session holder.
"""

from datetime import timedelta

from app.core.security import create_access_token, extract_token_from_header
from app.domains.identity.entities import AuditStamp, Identity
from app.domains.identity.services import IdentityService
from app.domains.identity.session import SessionHolder


def test_identity_from_valid_token():
    token = create_access_token({"sub": "u1", "name": "A", "email": "a@x.com"})

    identity = IdentityService.identity_from_token(token)

    assert identity == Identity(id="u1", display_name="A", email="a@x.com")


def test_invalid_expired_or_subjectless_tokens_are_rejected():
    expired = create_access_token({"sub": "u1"}, expires_delta=timedelta(minutes=-1))
    subjectless = create_access_token({"name": "A"})

    assert IdentityService.identity_from_token(None) is None
    assert IdentityService.identity_from_token("junk") is None
    assert IdentityService.identity_from_token(expired) is None
    assert IdentityService.identity_from_token(subjectless) is None


def test_extract_token_from_header():
    assert extract_token_from_header("Bearer abc") == "abc"
    assert extract_token_from_header("Basic abc") is None
    assert extract_token_from_header(None) is None


def test_session_holder_notifies_listeners(identity):
    session = SessionHolder()
    seen = []
    remove = session.add_listener(seen.append)

    assert not session.is_authenticated
    session.sign_in(identity)
    assert session.is_authenticated
    assert session.current == identity

    remove()
    session.sign_out()

    assert session.current is None
    assert seen == [identity]


def test_audit_stamp_round_trip(identity):
    stamp = AuditStamp.from_identity(identity)

    assert stamp.to_dict() == {"id": "u1", "name": "A", "email": "a@x.com"}
    assert AuditStamp.from_dict(stamp.to_dict()) == stamp
    assert AuditStamp.from_identity(None) is None
    assert AuditStamp.from_dict(None) is None
