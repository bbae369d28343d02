from datetime import datetime, timedelta

import pytz

from models.instructor import InstructorModel
from models.password_reset_token import PasswordResetTokenModel


def _register(client, **overrides):
    payload = {
        "first_name": "Alice",
        "last_name": "Liddell",
        "email": "alice@school.edu",
        "password": "wonder123",
        "role": "Student",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_register_student(client):
    response = _register(client)

    assert response.status_code == 200
    data = response.json()
    assert data["token"]
    assert data["user"]["email"] == "alice@school.edu"
    assert data["user"]["role"] == "Student"
    assert data["user"]["first_name"] == "Alice"


def test_register_duplicate_email_ignores_case(client):
    _register(client)
    response = _register(client, email="ALICE@School.edu")

    assert response.status_code == 409
    assert "already exists" in response.json()["message"]


def test_register_instructor_requires_department(client):
    response = _register(client, role="Instructor")

    assert response.status_code == 400
    assert response.json()["message"] == "Department is required for instructors."


def test_register_instructor_unknown_department(client):
    response = _register(client, role="Instructor", department_id=31)

    assert response.status_code == 404
    assert response.json()["message"] == "Department 31 not found"


def test_register_instructor_creates_instructor(client, db, department):
    response = _register(
        client, role="Instructor", email="prof@school.edu", department_id=department.id
    )

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "Instructor"
    instructor = db.query(InstructorModel).filter_by(email="prof@school.edu").one()
    assert instructor.department_id == department.id
    db.expire_all()
    assert department.head_instructor_id == instructor.id


def test_register_rejects_short_password(client):
    response = _register(client, password="abc")

    assert response.status_code == 400
    body = response.json()
    assert "password" in body["message"]
    assert body["inner"]


def test_login(client):
    _register(client)

    bad = client.post(
        "/api/auth/login", json={"email": "alice@school.edu", "password": "nope"}
    )
    assert bad.status_code == 401
    assert bad.json() == {"message": "Invalid credentials"}

    unknown = client.post(
        "/api/auth/login", json={"email": "who@school.edu", "password": "wonder123"}
    )
    assert unknown.status_code == 401

    good = client.post(
        "/api/auth/login", json={"email": "Alice@school.edu", "password": "wonder123"}
    )
    assert good.status_code == 200
    data = good.json()
    assert data["user"]["role"] == "Student"
    assert data["user"]["last_name"] == "Liddell"
    expiration = datetime.fromisoformat(data["expiration"].replace("Z", "+00:00"))
    remaining = expiration - datetime.now(pytz.utc)
    assert timedelta(minutes=110) < remaining <= timedelta(hours=2)


def test_me_and_logout(client):
    token = _register(client).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    me = client.get("/api/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["name"] == "Alice Liddell"
    assert me.json()["roles"] == ["Student"]

    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/auth/me").status_code == 401


def test_invalid_token(client):
    response = client.get(
        "/api/auth/me", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid authentication credentials"


def test_update_profile(client):
    token = _register(client).json()["token"]
    _register(client, email="bob@school.edu", first_name="Bob")
    headers = {"Authorization": f"Bearer {token}"}

    response = client.put(
        "/api/auth/profile",
        headers=headers,
        data={"bio": "Down the rabbit hole", "company": "Wonderland"},
    )
    assert response.status_code == 200
    assert response.json()["bio"] == "Down the rabbit hole"
    assert response.json()["first_name"] == "Alice"

    taken = client.put(
        "/api/auth/profile", headers=headers, data={"email": "BOB@school.edu"}
    )
    assert taken.status_code == 409


def test_register_with_photo(client):
    response = client.post(
        "/api/auth/register-with-photo",
        data={
            "first_name": "Carol",
            "last_name": "Photo",
            "email": "carol@school.edu",
            "password": "camera123",
            "role": "Student",
        },
        files={"photo": ("carol.png", b"\x89PNG data", "image/png")},
    )

    assert response.status_code == 200
    assert response.json()["user"]["profile_photo_url"].startswith("/uploads/profiles/")


def test_register_with_bad_photo_still_registers(client):
    response = client.post(
        "/api/auth/register-with-photo",
        data={
            "first_name": "Dan",
            "last_name": "Doc",
            "email": "dan@school.edu",
            "password": "camera123",
            "role": "Student",
        },
        files={"photo": ("cv.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 200
    assert response.json()["user"]["profile_photo_url"] is None


def test_password_reset_flow(client):
    _register(client)

    missing = client.post("/api/auth/forgot-password", json={"email": "x@school.edu"})
    assert missing.status_code == 404

    token = client.post(
        "/api/auth/forgot-password", json={"email": "alice@school.edu"}
    ).json()["token"]

    wrong = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@school.edu", "token": "bogus", "new_password": "fresh123"},
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Invalid token."

    reset = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@school.edu", "token": token, "new_password": "fresh123"},
    )
    assert reset.status_code == 200

    reused = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@school.edu", "token": token, "new_password": "again123"},
    )
    assert reused.status_code == 400

    login = client.post(
        "/api/auth/login", json={"email": "alice@school.edu", "password": "fresh123"}
    )
    assert login.status_code == 200


def test_expired_reset_token(client, db):
    _register(client)
    token = client.post(
        "/api/auth/forgot-password", json={"email": "alice@school.edu"}
    ).json()["token"]
    model = db.query(PasswordResetTokenModel).filter_by(token=token).one()
    model.expires_at = (datetime.now(pytz.utc) - timedelta(minutes=1)).isoformat()
    db.commit()

    response = client.post(
        "/api/auth/reset-password",
        json={"email": "alice@school.edu", "token": token, "new_password": "late1234"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Reset token has expired."


def test_profile_email_change_follows_instructor_record(client, db, department):
    token = _register(
        client, role="Instructor", email="prof@school.edu", department_id=department.id
    ).json()["token"]

    response = client.put(
        "/api/auth/profile",
        headers={"Authorization": f"Bearer {token}"},
        data={"email": "professor@school.edu"},
    )

    assert response.status_code == 200
    db.expire_all()
    instructor = db.query(InstructorModel).one()
    assert instructor.email == "professor@school.edu"


def test_profile_conflict_stores_no_photo(client, tmp_path):
    token = _register(client).json()["token"]
    _register(client, email="bob@school.edu", first_name="Bob")

    response = client.put(
        "/api/auth/profile",
        headers={"Authorization": f"Bearer {token}"},
        data={"email": "bob@school.edu"},
        files={"photo": ("alice.png", b"\x89PNG data", "image/png")},
    )

    assert response.status_code == 409
    photo_dir = tmp_path / "profiles"
    assert not photo_dir.exists() or list(photo_dir.iterdir()) == []
