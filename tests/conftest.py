from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from colloquium.api.v1.dependencies import get_media_store_dep
from colloquium.core.security import create_access_token
from colloquium.db.ids import new_id
from colloquium.db.session import Base
from colloquium.db.session import get_db as app_get_session
from colloquium.main import app as fastapi_app
from colloquium.models import Community, User
from colloquium.models.user import ROLE_ADMIN, ROLE_DOCTOR, ROLE_UNVERIFIED
from colloquium.services.comment_service import CommentService
from colloquium.services.community_service import CommunityService
from colloquium.services.media import MediaStore
from colloquium.services.notification_service import NotificationService
from colloquium.services.post_service import PostService
from colloquium.services.report_service import ReportService

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def media_store() -> AsyncMock:
    """Media store double that reports every deletion as successful."""
    store = AsyncMock(spec=MediaStore)
    store.enabled = True
    store.delete_images.return_value = []
    return store


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    media_store: AsyncMock,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_media_store_dep] = lambda: media_store
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_media_store_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists directory entries."""

    def _make_user(
        first_name: str = "Test",
        last_name: str = "User",
        role: str = ROLE_DOCTOR,
        **fields: Any,
    ) -> User:
        user = User(
            id=fields.pop("id", new_id()),
            email=fields.pop("email", f"{first_name.lower()}.{last_name.lower()}@example.org"),
            first_name=first_name,
            last_name=last_name,
            role=role,
            joined_forums=[],
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def owner(make_user: Callable[..., User]) -> User:
    """Doctor who owns the default community."""
    return make_user("Olivia", "Owner", specialty="Cardiology")


@pytest.fixture()
def doctor(make_user: Callable[..., User]) -> User:
    return make_user("Dan", "Doctor", specialty="Neurology")


@pytest.fixture()
def other_doctor(make_user: Callable[..., User]) -> User:
    return make_user("Dora", "Doctor", specialty="Oncology")


@pytest.fixture()
def unverified_user(make_user: Callable[..., User]) -> User:
    return make_user("Uma", "Unverified", role=ROLE_UNVERIFIED)


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user("Ada", "Admin", role=ROLE_ADMIN)


@pytest.fixture()
def notification_service(db_session: Session) -> NotificationService:
    return NotificationService(db_session)


@pytest.fixture()
def community_service(
    db_session: Session,
    notification_service: NotificationService,
    media_store: AsyncMock,
) -> CommunityService:
    return CommunityService(db_session, notifications=notification_service, media=media_store)


@pytest.fixture()
def post_service(
    db_session: Session,
    notification_service: NotificationService,
    media_store: AsyncMock,
) -> PostService:
    return PostService(db_session, notifications=notification_service, media=media_store)


@pytest.fixture()
def comment_service(
    db_session: Session,
    notification_service: NotificationService,
) -> CommentService:
    return CommentService(db_session, notifications=notification_service)


@pytest.fixture()
def report_service(
    db_session: Session,
    post_service: PostService,
    comment_service: CommentService,
) -> ReportService:
    return ReportService(db_session, posts=post_service, comments=comment_service)


@pytest.fixture()
def community(community_service: CommunityService, owner: User) -> Community:
    """Open community owned by ``owner``."""
    return community_service.create_community(
        owner.id,
        name="Cardiology Forum",
        description="Discussion of cardiology cases",
    )


@pytest.fixture()
def moderated_community(community_service: CommunityService, owner: User) -> Community:
    """Community requiring approval for both members and posts."""
    return community_service.create_community(
        owner.id,
        name="Reviewed Forum",
        description="Every member and post is reviewed",
        requires_approval=True,
        requires_post_approval=True,
    )


def _auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper building authorization headers for a user."""
    return _auth_headers
