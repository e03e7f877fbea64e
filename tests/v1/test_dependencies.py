# mypy: ignore-errors
"""Tests for API dependencies module."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from colloquium.api.v1.dependencies import get_current_user, http_error
from colloquium.core.security import create_access_token
from colloquium.core.settings import settings
from colloquium.services.errors import (
    AlreadyMemberError,
    BannedError,
    InvalidInputError,
    NoPendingRequestError,
)


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    """Test the get_current_user dependency function."""

    def test_get_current_user_success(self, db_session, doctor):
        user = get_current_user(_credentials(create_access_token(doctor.id)), db_session)
        assert user.id == doctor.id

    def test_unknown_user(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials(create_access_token("ghost")), db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "User not found"

    def test_expired_token(self, db_session, doctor):
        token = jwt.encode(
            {"sub": doctor.id, "exp": datetime.now(UTC) - timedelta(minutes=1)},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials(token), db_session)
        assert exc_info.value.detail == "Could not validate credentials"

    def test_missing_subject(self, db_session):
        token = jwt.encode({"role": "doctor"}, settings.secret_key, algorithm=settings.jwt_algorithm)
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials(token), db_session)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (NoPendingRequestError("no request"), status.HTTP_404_NOT_FOUND),
        (BannedError("banned"), status.HTTP_403_FORBIDDEN),
        (AlreadyMemberError("member"), status.HTTP_409_CONFLICT),
        (InvalidInputError("bad input"), status.HTTP_400_BAD_REQUEST),
    ],
)
def test_http_error_mapping(error, expected):
    exc = http_error(error)
    assert exc.status_code == expected
    assert exc.detail == error.message
