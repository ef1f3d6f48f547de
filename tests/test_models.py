"""Model constraints: per-tenant email uniqueness, required references, enumerations."""
import pytest

from projectdesk.database import commit
from projectdesk.models.project import Project, ProjectStatus
from projectdesk.models.user import User, UserRole
from projectdesk.core.exceptions import ConflictError, ValidationError
from tests.conftest import PASSWORD_HASH


def _user(tenant_id, email="a@x.com", **kwargs):
    return User(tenant_id=tenant_id, email=email, full_name="A", password_hash=PASSWORD_HASH, **kwargs)


def test_same_email_same_tenant_conflicts(db, make_tenant):
    t1 = make_tenant("t1")
    db.add(_user(t1.id))
    commit(db)

    db.add(_user(t1.id))
    with pytest.raises(ConflictError) as exc_info:
        commit(db)
    assert exc_info.value.status_code == 409


def test_same_email_different_tenants_succeeds(db, make_tenant):
    t1 = make_tenant("t1")
    t2 = make_tenant("t2")
    db.add(_user(t1.id))
    db.add(_user(t2.id))
    commit(db)

    assert db.query(User).filter(User.email == "a@x.com").count() == 2


def test_user_defaults(db, make_tenant):
    tenant = make_tenant()
    user = _user(tenant.id)
    db.add(user)
    commit(db)
    db.refresh(user)

    assert user.role == UserRole.USER
    assert user.is_active is True
    assert len(user.id) == 36
    assert user.created_at is not None
    assert user.updated_at is not None


def test_user_tenant_is_optional(db):
    user = _user(None, email="root@platform.io", role=UserRole.SUPER_ADMIN)
    db.add(user)
    commit(db)
    assert user.tenant_id is None


@pytest.mark.parametrize("role", ["super_admin", "tenant_admin", "user"])
def test_valid_roles_accepted(role):
    assert _user(None, role=role).role == UserRole(role)


@pytest.mark.parametrize("role", ["admin", "owner", "SUPER_ADMIN", ""])
def test_invalid_role_rejected(role):
    with pytest.raises(ValidationError):
        _user(None, role=role)


def test_invalid_role_rejected_on_assignment(db, make_tenant):
    user = _user(make_tenant().id)
    with pytest.raises(ValidationError):
        user.role = "manager"


def test_user_full_name_required(db, make_tenant):
    db.add(User(tenant_id=make_tenant().id, email="b@x.com", password_hash=PASSWORD_HASH))
    with pytest.raises(ValidationError):
        commit(db)


def test_project_defaults_to_active(db, make_tenant, make_user):
    tenant = make_tenant()
    creator = make_user(tenant, "creator@x.com")
    project = Project(name="Roadmap", tenant_id=tenant.id, created_by_id=creator.id)
    db.add(project)
    commit(db)
    db.refresh(project)

    assert project.status == ProjectStatus.ACTIVE
    assert project.description is None


def test_project_requires_tenant(db, make_tenant, make_user):
    creator = make_user(make_tenant(), "creator@x.com")
    db.add(Project(name="Orphan", created_by_id=creator.id))
    with pytest.raises(ValidationError) as exc_info:
        commit(db)
    assert "tenant_id" in exc_info.value.detail


def test_project_requires_creator(db, make_tenant):
    db.add(Project(name="Anonymous", tenant_id=make_tenant().id))
    with pytest.raises(ValidationError) as exc_info:
        commit(db)
    assert "created_by" in exc_info.value.detail


def test_project_unknown_tenant_rejected(db, make_tenant, make_user):
    creator = make_user(make_tenant(), "creator@x.com")
    db.add(Project(name="Ghost", tenant_id="00000000-0000-0000-0000-000000000000", created_by_id=creator.id))
    with pytest.raises(ValidationError):
        commit(db)


@pytest.mark.parametrize("status", ["active", "archived", "completed"])
def test_valid_project_status(status):
    assert Project(name="P", status=status).status == ProjectStatus(status)


@pytest.mark.parametrize("status", ["deleted", "done", "ACTIVE"])
def test_invalid_project_status_rejected(status):
    with pytest.raises(ValidationError):
        Project(name="P", status=status)


def test_project_columns_use_snake_case():
    columns = set(Project.__table__.columns.keys())
    assert {"tenant_id", "created_by", "created_at", "updated_at"} <= columns
    assert set(User.__table__.columns.keys()) >= {"full_name", "password_hash", "is_active", "tenant_id"}
