import pytest

from tests.helpers import auth_headers, make_fields


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


def test_user_management_requires_admin(client, owner):
    assert client.get("/api/admin/users").status_code == 401
    assert client.get("/api/admin/users", headers=auth_headers(owner)).status_code == 403
    response = client.put(f"/api/admin/users/{owner.id}/role", json={"role": "admin"}, headers=auth_headers(owner))
    assert response.status_code == 403
    assert client.get("/api/admin/statistics/detailed", headers=auth_headers(owner)).status_code == 403


def test_list_users(client, admin_headers, owner, other_user):
    body = client.get("/api/admin/users", params={"page": 0, "size": 2}, headers=admin_headers).json()

    assert body["totalCount"] == 3
    assert body["totalPages"] == 2
    assert [u["id"] for u in body["items"]] == [1, 42]
    assert body["items"][1]["display_name"] == "Eleanor Vance"


def test_get_user(client, admin_headers, owner):
    response = client.get(f"/api/admin/users/{owner.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["username"] == "eleanor"

    assert client.get("/api/admin/users/12345", headers=admin_headers).status_code == 404


def test_update_user(client, admin_headers, owner, other_user):
    response = client.put(
        f"/api/admin/users/{owner.id}", json={"display_name": "E. Vance"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["display_name"] == "E. Vance"
    assert response.json()["email"] == "eleanor@example.com"

    response = client.put(
        f"/api/admin/users/{owner.id}", json={"email": "marcus@example.com"}, headers=admin_headers
    )
    assert response.status_code == 400


def test_promote_user_to_admin(client, admin_headers, owner):
    url = f"/api/admin/users/{owner.id}/role"

    response = client.put(url, json={"role": "admin"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    # The promoted user can now reach admin routes.
    assert client.get("/api/admin/users", headers=auth_headers(owner)).status_code == 200

    assert client.put(url, json={"role": "ADMIN"}, headers=admin_headers).status_code == 400
    assert client.put("/api/admin/users/12345/role", json={"role": "user"}, headers=admin_headers).status_code == 404


def test_delete_user(client, admin_headers, owner, other_user, manuscript_service):
    manuscript_service.create_manuscript(make_fields(), owner.id)

    response = client.delete(f"/api/admin/users/{other_user.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert client.get(f"/api/admin/users/{other_user.id}", headers=admin_headers).status_code == 404

    assert client.delete(f"/api/admin/users/{owner.id}", headers=admin_headers).status_code == 400


def test_detailed_statistics(client, admin_headers, owner, other_user, manuscript_service):
    manuscript_service.create_manuscript(make_fields(title="One"), owner.id)
    manuscript_service.create_manuscript(make_fields(title="Two"), owner.id)

    body = client.get("/api/admin/statistics/detailed", headers=admin_headers).json()

    assert body == {
        "manuscripts": {"totalManuscripts": 2, "recentUpdates": 2, "totalContributors": 1},
        "users": {"totalUsers": 3, "adminUsers": 1, "regularUsers": 2},
    }
