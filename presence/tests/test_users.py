"""
Tests for user management and profile endpoints
"""
from fastapi import status
from presence.core.security import verify_password
from presence.models.attendance import AttendanceRecord
from presence.models.user import User
from presence.tests.conftest import OFFICE_LAT, OFFICE_LNG, auth_headers


def _admin(client):
    return auth_headers(client, "admin@company.com", "adminpass123")


def test_get_me(client, test_employee):
    headers = auth_headers(client, "budi@company.com")
    response = client.get("/api/v1/users/me", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "budi@company.com"
    assert data["full_name"] == "Budi Santoso"
    assert data["role"] == "employee"
    assert data["department"] == "IT"
    assert "password_hash" not in data
    assert data["created_at"].endswith("+07:00")


def test_update_me_profile(client, db, test_employee):
    headers = auth_headers(client, "budi@company.com")
    response = client.patch(
        "/api/v1/users/me",
        json={"full_name": "Budi S.", "department": "Engineering", "photo_url": "avatars/budi.png"},
        headers=headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["full_name"] == "Budi S."
    assert data["department"] == "Engineering"
    assert data["photo_url"] == "avatars/budi.png"
    assert data["role"] == "employee"


def test_update_me_password(client, db, test_employee):
    headers = auth_headers(client, "budi@company.com")
    client.patch("/api/v1/users/me", json={"password": "barupass456"}, headers=headers)

    db.refresh(test_employee)
    assert verify_password("barupass456", test_employee.password_hash)


def test_update_me_empty_password_keeps_current(client, db, test_employee):
    headers = auth_headers(client, "budi@company.com")
    response = client.patch("/api/v1/users/me", json={"password": "   "}, headers=headers)
    assert response.status_code == 200

    db.refresh(test_employee)
    assert verify_password("testpass123", test_employee.password_hash)


def test_update_me_cannot_change_role(client, db, test_employee):
    headers = auth_headers(client, "budi@company.com")
    client.patch("/api/v1/users/me", json={"role": "admin"}, headers=headers)
    db.refresh(test_employee)
    assert test_employee.role == "employee"


def test_list_users_requires_admin(client, test_employee):
    headers = auth_headers(client, "budi@company.com")
    response = client.get("/api/v1/users", headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_lists_users(client, test_admin, test_employee, other_employee):
    response = client.get("/api/v1/users", headers=_admin(client))
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {
        "admin@company.com", "budi@company.com", "sari@company.com",
    }

    employees = client.get("/api/v1/users?role=employee", headers=_admin(client)).json()
    assert {u["email"] for u in employees} == {"budi@company.com", "sari@company.com"}


def test_admin_creates_user(client, db, test_admin):
    response = client.post(
        "/api/v1/users",
        json={
            "email": "Rina@Company.com",
            "password": "rinapass1",
            "full_name": "Rina",
            "department": "HR",
        },
        headers=_admin(client),
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["email"] == "rina@company.com"
    assert data["role"] == "employee"
    assert data["active"] is True

    login = client.post("/api/v1/auth/login", json={"email": "rina@company.com", "password": "rinapass1"})
    assert login.status_code == 200


def test_create_user_duplicate_email(client, test_admin, test_employee):
    response = client.post(
        "/api/v1/users",
        json={"email": "budi@company.com", "password": "whatever1", "full_name": "Budi 2"},
        headers=_admin(client),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_user_validation(client, test_admin):
    bad_email = client.post(
        "/api/v1/users",
        json={"email": "not-an-email", "password": "whatever1", "full_name": "X"},
        headers=_admin(client),
    )
    assert bad_email.status_code == 422

    short_password = client.post(
        "/api/v1/users",
        json={"email": "x@company.com", "password": "123", "full_name": "X"},
        headers=_admin(client),
    )
    assert short_password.status_code == 422


def test_admin_gets_user(client, test_admin, test_employee):
    response = client.get(f"/api/v1/users/{test_employee.id}", headers=_admin(client))
    assert response.status_code == 200
    assert response.json()["email"] == "budi@company.com"

    missing = client.get("/api/v1/users/9999", headers=_admin(client))
    assert missing.status_code == 404


def test_admin_updates_user(client, db, test_admin, test_employee):
    response = client.patch(
        f"/api/v1/users/{test_employee.id}",
        json={"role": "admin", "department": None, "active": False},
        headers=_admin(client),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "admin"
    assert data["department"] is None
    assert data["active"] is False


def test_admin_update_email_conflict(client, test_admin, test_employee, other_employee):
    response = client.patch(
        f"/api/v1/users/{test_employee.id}",
        json={"email": "sari@company.com"},
        headers=_admin(client),
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_admin_update_empty_password_keeps_current(client, db, test_admin, test_employee):
    client.patch(
        f"/api/v1/users/{test_employee.id}",
        json={"password": "", "full_name": "Budi Baru"},
        headers=_admin(client),
    )
    db.refresh(test_employee)
    assert test_employee.full_name == "Budi Baru"
    assert verify_password("testpass123", test_employee.password_hash)


def test_admin_deletes_user_and_records(client, db, test_admin, test_employee):
    headers = auth_headers(client, "budi@company.com")
    client.post(
        "/api/v1/attendance/check-in",
        json={"latitude": OFFICE_LAT, "longitude": OFFICE_LNG},
        headers=headers,
    )
    user_id = test_employee.id

    response = client.delete(f"/api/v1/users/{user_id}", headers=_admin(client))
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert db.query(User).filter(User.id == user_id).first() is None
    assert db.query(AttendanceRecord).filter(AttendanceRecord.user_id == user_id).count() == 0


def test_admin_cannot_delete_self(client, test_admin):
    response = client.delete(f"/api/v1/users/{test_admin.id}", headers=_admin(client))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
