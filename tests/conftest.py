"""Shared fixtures: an app on in-memory SQLite, a session, and seed helpers."""
import pytest
from fastapi.testclient import TestClient

from projectdesk.config import Settings
from projectdesk.main import create_app
from projectdesk.models.tenant import Tenant
from projectdesk.models.user import User, UserRole
from projectdesk.core.security import get_password_hash
from projectdesk.controllers.auth_controller import issue_token

PASSWORD = "correct-horse-battery"

# bcrypt is slow; hash once for every seeded user
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        AUTO_CREATE_TABLES=True,
        SECRET_KEY="test-secret",
        ENVIRONMENT="testing",
        LOG_LEVEL="WARNING",
        SUPERADMIN_EMAIL=None,
        SUPERADMIN_PASSWORD=None,
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.state.db.create_all()
    yield app
    app.state.db.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db(app):
    session = app.state.db.session()
    yield session
    session.close()


@pytest.fixture
def make_tenant(db):
    def _make(slug: str = "acme", name: str = None, is_active: bool = True) -> Tenant:
        tenant = Tenant(name=name or slug.title(), slug=slug, is_active=is_active)
        db.add(tenant)
        db.commit()
        return tenant
    return _make


@pytest.fixture
def make_user(db):
    def _make(tenant, email: str, role: UserRole = UserRole.USER, is_active: bool = True) -> User:
        user = User(
            tenant_id=tenant.id if tenant is not None else None,
            email=email,
            full_name=email.split("@")[0].title(),
            password_hash=PASSWORD_HASH,
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def auth_headers(settings):
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_token(user, settings)}"}
    return _headers


@pytest.fixture
def super_admin(make_user):
    return make_user(None, "root@platform.io", role=UserRole.SUPER_ADMIN)
