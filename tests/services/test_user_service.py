import pytest
from fastapi import HTTPException

from matchday.models import UserRole
from matchday.schemas.user_schemas import UserCreate
from matchday.services import user_service


class TestUserService:

    def test_create_user_success(self, db_session):
        user = user_service.create_user(
            db_session, UserCreate(name="Test User", email="Test@Example.com", password="secret123")
        )
        assert user.id is not None
        assert user.email == "test@example.com"
        assert user.role == UserRole.MEMBER.value
        assert user.is_admin is False
        assert user.hashed_password != "secret123"

    def test_create_user_duplicate_email(self, db_session):
        user_service.create_user(db_session, UserCreate(name="One", email="duplicate@example.com", password="secret123"))
        with pytest.raises(HTTPException) as exc_info:
            user_service.create_user(db_session, UserCreate(name="Two", email="duplicate@example.com", password="secret456"))
        assert exc_info.value.status_code == 409

    def test_authenticate_user(self, db_session, make_user):
        make_user(email="login@example.com", password="correct-horse")
        assert user_service.authenticate_user(db_session, "login@example.com", "correct-horse") is not None
        assert user_service.authenticate_user(db_session, "login@example.com", "wrong") is None
        assert user_service.authenticate_user(db_session, "nobody@example.com", "correct-horse") is None

    def test_authenticate_google_only_user(self, db_session, make_user):
        make_user(email="google@example.com")
        assert user_service.authenticate_user(db_session, "google@example.com", "anything") is None

    @pytest.mark.parametrize("role,is_admin", [
        (UserRole.MAIN_ADMIN, True),
        (UserRole.SUB_ADMIN, True),
        (UserRole.MEMBER, False),
        (UserRole.DORMANT, False),
    ])
    def test_is_admin_derived_from_role(self, make_user, role, is_admin):
        assert make_user(role=role).is_admin is is_admin


class TestChangeRole:

    def test_main_admin_promotes_member(self, db_session, make_user):
        main = make_user(role=UserRole.MAIN_ADMIN)
        member = make_user()

        updated = user_service.change_role(db_session, main, member.id, UserRole.SUB_ADMIN)

        assert updated.role == UserRole.SUB_ADMIN.value
        assert updated.is_admin is True

    def test_sub_admin_cannot_change_roles(self, db_session, make_user):
        sub = make_user(role=UserRole.SUB_ADMIN)
        member = make_user()

        with pytest.raises(HTTPException) as exc_info:
            user_service.change_role(db_session, sub, member.id, UserRole.DORMANT)

        assert exc_info.value.status_code == 403
        db_session.refresh(member)
        assert member.role == UserRole.MEMBER.value

    def test_main_admin_role_is_fixed(self, db_session, make_user):
        main = make_user(role=UserRole.MAIN_ADMIN)
        with pytest.raises(HTTPException) as exc_info:
            user_service.change_role(db_session, main, main.id, UserRole.MEMBER)
        assert exc_info.value.status_code == 403

    def test_main_admin_cannot_be_granted(self, db_session, make_user):
        main = make_user(role=UserRole.MAIN_ADMIN)
        member = make_user()
        with pytest.raises(HTTPException) as exc_info:
            user_service.change_role(db_session, main, member.id, UserRole.MAIN_ADMIN)
        assert exc_info.value.status_code == 400

    def test_unknown_target(self, db_session, make_user):
        main = make_user(role=UserRole.MAIN_ADMIN)
        with pytest.raises(HTTPException) as exc_info:
            user_service.change_role(db_session, main, 999, UserRole.MEMBER)
        assert exc_info.value.status_code == 404


class TestActivateDormant:

    def test_dormant_becomes_member(self, db_session, make_user):
        user = make_user(role=UserRole.DORMANT)
        assert user_service.activate_dormant_user(db_session, user).role == UserRole.MEMBER.value

    def test_active_user_cannot_be_reactivated(self, db_session, make_user):
        with pytest.raises(HTTPException):
            user_service.activate_dormant_user(db_session, make_user())
