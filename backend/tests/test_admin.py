from conftest import auth_headers, create_trip

from tripplanner.models import Trip


def test_stats(client, admin, user, seeded):
    create_trip(client, user["token"])
    response = client.get("/admin/stats", headers=auth_headers(admin["token"]))
    assert response.status_code == 200
    stats = response.json()
    assert stats["total_users"] == 2
    assert stats["total_trips"] == 1
    assert stats["total_cities"] == 6
    assert stats["total_activities"] == 6
    assert stats["recent_trips"] == 1
    assert stats["popular_cities"][0]["name"] == "Paris"
    assert len(stats["recent_users"]) == 2
    assert all("hashed_password" not in u for u in stats["recent_users"])


def test_stats_requires_admin(client, user):
    response = client.get("/admin/stats", headers=auth_headers(user["token"]))
    assert response.status_code == 403
    assert response.json()["error"] == "Admin access required"


def test_list_users(client, admin, user):
    response = client.get("/admin/users", headers=auth_headers(admin["token"]))
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {"admin@example.com", "alice@example.com"}


def test_delete_user_cascades_to_trips(client, admin, user, db):
    create_trip(client, user["token"])
    response = client.delete(f"/admin/users/{user['id']}", headers=auth_headers(admin["token"]))
    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert db.query(Trip).count() == 0


def test_admin_cannot_delete_self(client, admin):
    response = client.delete(f"/admin/users/{admin['id']}", headers=auth_headers(admin["token"]))
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete your own account"


def test_delete_unknown_user(client, admin):
    response = client.delete("/admin/users/9999", headers=auth_headers(admin["token"]))
    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


def test_regular_user_cannot_delete_users(client, user, other_user):
    response = client.delete(f"/admin/users/{other_user['id']}", headers=auth_headers(user["token"]))
    assert response.status_code == 403
