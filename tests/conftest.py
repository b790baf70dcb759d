from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

JWT_SECRET = "test-suite-secret-with-at-least-32-characters"
os.environ.setdefault("ENABLE_TRACING", "false")
os.environ.setdefault("AUTH_JWT_SECRET", JWT_SECRET)
os.environ.setdefault("AUTH_SERVICE_ROLE_KEY", "service-role-key")
os.environ.setdefault("SITE_URL", "http://localhost:3000")

from transfer_agent.api.deps import get_auth_provider, get_db_session, get_document_storage
from transfer_agent.core.config import get_settings
from transfer_agent.core.errors import ProviderError
from transfer_agent.main import app
from transfer_agent.models import Base, Issuer, IssuerUser, Role, RoleName, User
from transfer_agent.obs import AuditMiddleware
from transfer_agent.services.auth_provider import AuthIdentity, AuthSession
from transfer_agent.services.documents import DocumentStorage

ROLE_DISPLAY_NAMES = {
    RoleName.SUPERADMIN: "Super Admin",
    RoleName.ADMIN: "Admin",
    RoleName.TRANSFER_TEAM: "Transfer Team",
    RoleName.SHAREHOLDER: "Shareholder",
    RoleName.BROKER: "Broker",
    RoleName.READ_ONLY: "Read Only",
}


class InMemoryS3Client:
    """Simple in-memory S3 stub shared by the audit middleware and document storage."""

    exceptions = SimpleNamespace(NoSuchKey=type("NoSuchKey", (Exception,), {}))

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, bytes]] = {}
        self.put_calls: list[dict[str, object]] = []

    def head_bucket(self, *, Bucket: str) -> None:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    def create_bucket(self, *, Bucket: str, **_: object) -> None:
        self._buckets.setdefault(Bucket, {})

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, BytesIO]:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "NoSuchBucket"}}, "GetObject")
        bucket = self._buckets[Bucket]
        if Key not in bucket:
            raise self.exceptions.NoSuchKey()
        return {"Body": BytesIO(bucket[Key])}

    def put_object(self, *, Bucket: str, Key: str, Body: bytes, **kwargs: object) -> dict[str, str]:
        data = Body.encode("utf-8") if isinstance(Body, str) else Body
        self._buckets.setdefault(Bucket, {})[Key] = data
        self.put_calls.append({"Bucket": Bucket, "Key": Key, **kwargs})
        return {"ETag": "in-memory"}

    @property
    def buckets(self) -> dict[str, dict[str, bytes]]:
        return self._buckets


@dataclass
class FakeAuthProvider:
    """Stands in for the hosted auth provider's OAuth and admin APIs."""

    identity: AuthIdentity | None = None
    access_token: str = "provider-access-token"
    exchange_error: str | None = None
    delete_error: str | None = None
    exchanged_codes: list[str] = field(default_factory=list)
    deleted_user_ids: list[str] = field(default_factory=list)

    def exchange_code_for_session(self, code: str, *, code_verifier: str | None = None) -> AuthSession:
        self.exchanged_codes.append(code)
        if self.exchange_error:
            raise ProviderError(self.exchange_error)
        return AuthSession(
            access_token=self.access_token,
            refresh_token="refresh",
            expires_in=3600,
            user=self.identity,
        )

    def delete_user(self, user_id: str) -> None:
        if self.delete_error:
            raise ProviderError(self.delete_error)
        self.deleted_user_ids.append(user_id)


engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def audit_s3_client(monkeypatch: pytest.MonkeyPatch) -> Iterator[InMemoryS3Client]:
    client = InMemoryS3Client()

    def _client_factory(*args: object, **kwargs: object) -> InMemoryS3Client:
        return client

    monkeypatch.setattr("transfer_agent.obs.audit.boto3.client", _client_factory)
    stack = getattr(app, "middleware_stack", None)
    middleware = getattr(stack, "app", None)
    while middleware is not None and hasattr(middleware, "app"):
        if isinstance(middleware, AuditMiddleware):
            middleware._s3_client = None
            middleware._bucket_ready = False
        middleware = getattr(middleware, "app", None)
    yield client


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    session.add_all(
        Role(role_name=role.value, display_name=ROLE_DISPLAY_NAMES[role]) for role in RoleName
    )
    session.commit()

    yield session
    session.close()


@pytest.fixture()
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture()
def client(
    db_session: Session,
    audit_s3_client: InMemoryS3Client,
    auth_provider: FakeAuthProvider,
) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_document_storage] = lambda: DocumentStorage(
        settings=get_settings(), s3_client_factory=lambda: audit_s3_client
    )

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def mint_token(user_id: str, email: str, *, secret: str = JWT_SECRET) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def role_id(session: Session, role: RoleName) -> int:
    return session.query(Role).filter(Role.role_name == role.value).one().id


@pytest.fixture()
def issuer(db_session: Session) -> Issuer:
    record = Issuer(issuer_name="Cal Redwood Acquisition Corp", display_name="Cal Redwood")
    db_session.add(record)
    db_session.commit()
    return record


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make_user(
        email: str,
        *,
        issuer: Issuer | None = None,
        role: RoleName | None = None,
        is_super_admin: bool = False,
        user_id: str | None = None,
    ) -> User:
        user = User(
            id=user_id or f"user-{email.split('@')[0]}",
            email=email,
            name=email.split("@")[0].title(),
            is_super_admin=is_super_admin,
        )
        db_session.add(user)
        db_session.flush()
        if issuer is not None and role is not None:
            db_session.add(
                IssuerUser(user_id=user.id, issuer_id=issuer.id, role_id=role_id(db_session, role))
            )
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {mint_token(user.id, user.email)}"}

    return _headers


@pytest.fixture()
def transfer_team_user(make_user: Callable[..., User], issuer: Issuer) -> User:
    return make_user("ops@example.com", issuer=issuer, role=RoleName.TRANSFER_TEAM)


@pytest.fixture()
def auth_headers(
    transfer_team_user: User, headers_for: Callable[[User], dict[str, str]]
) -> dict[str, str]:
    return headers_for(transfer_team_user)
