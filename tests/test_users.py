"""The /api/users router: the caller's own tenant."""
import pytest

from projectdesk.models.user import UserRole


@pytest.fixture
def acme(make_tenant):
    return make_tenant("acme")


@pytest.fixture
def admin(acme, make_user):
    return make_user(acme, "admin@acme.io", role=UserRole.TENANT_ADMIN)


@pytest.fixture
def member(acme, make_user):
    return make_user(acme, "member@acme.io")


def test_requires_credentials(client):
    assert client.get("/api/users").status_code == 401


def test_admin_creates_user_in_own_tenant(client, acme, admin, auth_headers):
    response = client.post(
        "/api/users",
        json={"email": "New@acme.io", "full_name": "Newbie", "password": "longenough", "role": "tenant_admin"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["tenant_id"] == acme.id
    assert body["email"] == "new@acme.io"
    assert body["role"] == "tenant_admin"
    assert body["is_active"] is True


def test_new_user_can_log_in(client, admin, auth_headers):
    client.post(
        "/api/users",
        json={"email": "new@acme.io", "full_name": "Newbie", "password": "longenough"},
        headers=auth_headers(admin),
    )

    response = client.post(
        "/api/auth/login",
        json={"email": "new@acme.io", "password": "longenough", "tenant_slug": "acme"},
    )
    assert response.status_code == 200


def test_short_password_rejected(client, admin, auth_headers):
    response = client.post(
        "/api/users",
        json={"email": "new@acme.io", "full_name": "Newbie", "password": "short"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 422


def test_list_users_filtered_by_active(client, acme, admin, make_user, auth_headers):
    make_user(acme, "old@acme.io", is_active=False)

    response = client.get("/api/users", params={"is_active": "false"}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert [u["email"] for u in response.json()["users"]] == ["old@acme.io"]


def test_list_users_paginates(client, acme, admin, make_user, auth_headers):
    for i in range(4):
        make_user(acme, f"user{i}@acme.io")

    response = client.get("/api/users", params={"page": 2, "page_size": 2}, headers=auth_headers(admin))

    body = response.json()
    assert body["total"] == 5
    assert body["page"] == 2
    assert len(body["users"]) == 2


def test_get_user_from_other_tenant_not_found(client, member, make_tenant, make_user, auth_headers):
    outsider = make_user(make_tenant("globex"), "x@globex.io")

    response = client.get(f"/api/users/{outsider.id}", headers=auth_headers(member))
    assert response.status_code == 404


def test_member_updates_own_profile(client, member, auth_headers):
    response = client.patch(
        f"/api/users/{member.id}",
        json={"full_name": "Renamed Member"},
        headers=auth_headers(member),
    )

    assert response.status_code == 200
    assert response.json()["full_name"] == "Renamed Member"


def test_member_cannot_promote_self(client, member, auth_headers):
    response = client.patch(
        f"/api/users/{member.id}",
        json={"role": "tenant_admin"},
        headers=auth_headers(member),
    )
    assert response.status_code == 403


def test_member_cannot_edit_others(client, admin, member, auth_headers):
    response = client.patch(
        f"/api/users/{admin.id}",
        json={"full_name": "Pwned"},
        headers=auth_headers(member),
    )
    assert response.status_code == 403


def test_admin_deactivates_user(client, admin, member, auth_headers):
    response = client.patch(
        f"/api/users/{member.id}",
        json={"is_active": False},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False

    # The deactivated user's token stops working
    assert client.get("/api/users", headers=auth_headers(member)).status_code == 401


def test_email_change_conflict(client, admin, member, auth_headers):
    response = client.patch(
        f"/api/users/{member.id}",
        json={"email": "admin@acme.io"},
        headers=auth_headers(member),
    )
    assert response.status_code == 409


def test_super_admin_must_name_tenant(client, super_admin, auth_headers):
    assert client.get("/api/users", headers=auth_headers(super_admin)).status_code == 422
