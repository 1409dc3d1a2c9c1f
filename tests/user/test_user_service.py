from datetime import timedelta

import pytest
from jose import JWTError, jwt

from manupedia.core.config import settings
from manupedia.core.security import create_access_token, decode_access_token
from manupedia.services import user_service
from manupedia.services.exceptions import NotFoundError, ValidationError
from tests.helpers import make_fields


def test_lookups(db, owner):
    assert user_service.get_user_by_id(db, owner.id).username == "eleanor"
    assert user_service.get_user_by_email(db, "eleanor@example.com").id == owner.id
    assert user_service.get_user_by_id(db, 12345) is None
    assert user_service.get_user_by_email(db, "nobody@example.com") is None


def test_get_user_missing(db):
    with pytest.raises(NotFoundError):
        user_service.get_user(db, 12345)


def test_list_users_in_id_order(db, owner, other_user, admin_user):
    users, total = user_service.list_users(db, page=0, page_size=2)

    assert total == 3
    assert [u.id for u in users] == [1, 42]

    users, _ = user_service.list_users(db, page=1, page_size=2)
    assert [u.id for u in users] == [99]


def test_list_users_rejects_bad_paging(db):
    with pytest.raises(ValidationError):
        user_service.list_users(db, page=-1)


def test_update_user_profile(db, owner):
    user = user_service.update_user(db, owner.id, display_name="E. Vance", email="vance@example.com")

    assert user.display_name == "E. Vance"
    assert user.email == "vance@example.com"
    assert user.username == "eleanor"


def test_update_user_keeps_omitted_fields(db, owner):
    user = user_service.update_user(db, owner.id, display_name="E. Vance")
    assert user.email == "eleanor@example.com"


def test_update_user_rejects_taken_email_and_blank_name(db, owner, other_user):
    with pytest.raises(ValidationError):
        user_service.update_user(db, owner.id, email="marcus@example.com")
    with pytest.raises(ValidationError):
        user_service.update_user(db, owner.id, display_name="  ")


def test_update_user_role(db, owner):
    user = user_service.update_user_role(db, owner.id, "admin")
    assert user.is_admin is True

    user = user_service.update_user_role(db, owner.id, "user")
    assert user.is_admin is False


@pytest.mark.parametrize("role", ["ADMIN", "Admin", "superuser", ""])
def test_update_user_role_rejects_unknown_tokens(db, owner, role):
    with pytest.raises(ValidationError):
        user_service.update_user_role(db, owner.id, role)
    assert user_service.get_user(db, owner.id).role == "user"


def test_update_role_of_missing_user(db):
    with pytest.raises(NotFoundError):
        user_service.update_user_role(db, 12345, "admin")


def test_delete_user(db, other_user):
    user_service.delete_user(db, other_user.id)
    assert user_service.get_user_by_id(db, other_user.id) is None


def test_delete_user_who_owns_manuscripts_is_refused(db, owner, manuscript_service):
    manuscript_service.create_manuscript(make_fields(), owner.id)

    with pytest.raises(ValidationError):
        user_service.delete_user(db, owner.id)
    assert user_service.get_user_by_id(db, owner.id) is not None


def test_user_statistics(db, owner, other_user, admin_user):
    stats = user_service.get_user_statistics(db)

    assert stats.total_users == 3
    assert stats.admin_users == 1
    assert stats.regular_users == 2


def test_access_token_round_trip(owner):
    token = create_access_token(owner)
    assert decode_access_token(token) == owner.id


def test_expired_token_is_rejected(owner):
    token = create_access_token(owner, expires_delta=timedelta(minutes=-1))
    with pytest.raises(JWTError):
        decode_access_token(token)


def test_token_with_wrong_type_is_rejected():
    token = jwt.encode({"sub": "42", "type": "refresh"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    with pytest.raises(JWTError):
        decode_access_token(token)


def test_token_with_non_numeric_subject_is_rejected():
    token = jwt.encode({"sub": "eleanor", "type": "access"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    with pytest.raises(JWTError):
        decode_access_token(token)


def test_token_for_deleted_user_is_unauthorized(client, db, owner):
    token = create_access_token(owner)
    db.delete(owner)
    db.commit()

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
