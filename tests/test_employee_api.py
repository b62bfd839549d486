import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from employee_api import repository
from employee_api.config import Settings
from employee_api.errors import SchemaBootstrapError, StoreError
from employee_api.main import create_app
from employee_api.routers import employee_router


def _png(name="avatar.png", size=1024):
    return {"profileImage": (name, b"\x89PNG" + b"0" * (size - 4), "image/png")}


def _uploaded_files(settings):
    return sorted(os.listdir(settings.upload_dir))


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["status"] == "OK"
    assert body["database"] == "Connected"
    assert body["timestamp"]


def test_empty_listings(client):
    for path in ("/api/all-users", "/api/employees"):
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert resp.json()["count"] == 0
        assert resp.json()["data"] == []


def test_create_then_update(client, make_form):
    resp = client.post("/api/add-employee", data=make_form())
    assert resp.status_code == 201
    assert resp.json()["data"] == {"id": "ABC1234", "status": "created", "profileImage": None}

    resp = client.post("/api/add-employee", data=make_form(location="Bengaluru"))
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "updated"

    listing = client.get("/api/employees").json()
    assert listing["count"] == 1
    record = listing["data"][0]
    assert record["location"] == "Bengaluru"
    assert record["joinDate"] == "2020-06-01"
    assert record["dob"] == "1990-04-12"


def test_update_preserves_then_replaces_image(client, make_form, settings):
    first = client.post("/api/add-employee", data=make_form(), files=_png("one.png"))
    assert first.status_code == 201
    first_path = first.json()["data"]["profileImage"]
    assert first_path.startswith("uploads/") and first_path.endswith("-one.png")

    resp = client.post("/api/add-employee", data=make_form(name="Jane Doe"))
    assert resp.status_code == 200
    summary = client.get("/api/all-users").json()["data"][0]
    assert summary == {
        "id": "ABC1234",
        "name": "Jane Doe",
        "email": "john.doe@astrolitetech.com",
        "profileImage": first_path,
    }

    resp = client.post("/api/add-employee", data=make_form(), files=_png("two.png"))
    second_path = resp.json()["data"]["profileImage"]
    assert second_path != first_path
    assert client.get("/api/all-users").json()["data"][0]["profileImage"] == second_path

    # the previous file is left in place
    assert len(_uploaded_files(settings)) == 2


def test_uploaded_image_is_served(client, make_form):
    path = client.post("/api/add-employee", data=make_form(), files=_png()).json()["data"]["profileImage"]
    resp = client.get("/" + path)
    assert resp.status_code == 200
    assert resp.content.startswith(b"\x89PNG")


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"skills": ""}, "All fields are required"),
        ({"id": "abc1234"}, "Invalid Employee ID format (should be ABC1234 format)"),
        ({"email": "john.doe@other.com"}, "Invalid email format (must be @astrolitetech.com)"),
        ({"phone": "12345"}, "Phone number must be 10 digits"),
    ],
)
def test_validation_errors(client, make_form, overrides, message):
    resp = client.post("/api/add-employee", data=make_form(**overrides))
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["error"] == message
    assert "details" not in resp.json()


def test_missing_form_field_uses_envelope(client, make_form):
    form = make_form()
    del form["achievement"]
    resp = client.post("/api/add-employee", data=form)
    assert resp.status_code == 400
    assert resp.json()["code"] == "missing_field"


def test_failed_validation_leaves_no_file(client, make_form, settings):
    resp = client.post("/api/add-employee", data=make_form(phone="1"), files=_png())
    assert resp.status_code == 400
    assert _uploaded_files(settings) == []


def test_pdf_rejected_before_any_write(client, make_form, settings):
    files = {"profileImage": ("cv.pdf", b"%PDF-1.4", "application/pdf")}
    resp = client.post("/api/add-employee", data=make_form(), files=files)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Only JPEG or PNG images are allowed"
    assert resp.json()["code"] == "invalid_upload_type"
    assert client.get("/api/all-users").json()["count"] == 0
    assert _uploaded_files(settings) == []


def test_oversized_jpeg_rejected(client, make_form, settings):
    files = {"profileImage": ("big.jpg", b"\xff" * (6 * 1024 * 1024), "image/jpeg")}
    resp = client.post("/api/add-employee", data=make_form(), files=files)
    assert resp.status_code == 400
    assert resp.json()["code"] == "upload_too_large"
    assert client.get("/api/all-users").json()["count"] == 0
    assert _uploaded_files(settings) == []


def test_lost_create_race_is_reported_as_duplicate(client, make_form, monkeypatch, settings):
    assert client.post("/api/add-employee", data=make_form()).status_code == 201
    monkeypatch.setattr(repository, "_exists", lambda session, emp_id: False)

    resp = client.post("/api/add-employee", data=make_form(), files=_png())
    assert resp.status_code == 400
    assert resp.json()["error"] == "Employee ID already exists"
    assert resp.json()["code"] == "duplicate_employee"
    assert _uploaded_files(settings) == []


def test_delete_then_list(client, make_form):
    client.post("/api/add-employee", data=make_form())
    client.post("/api/add-employee", data=make_form(id="XYZ0001"))

    resp = client.delete("/api/delete-employee/ABC1234")
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == "ABC1234"
    assert resp.json()["data"]["name"] == "John Doe"

    ids = [r["id"] for r in client.get("/api/all-users").json()["data"]]
    assert ids == ["XYZ0001"]

    resp = client.delete("/api/delete-employee/ABC1234")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Employee not found", "code": "not_found"}


def test_unknown_route(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Endpoint not found", "code": "not_found"}


def test_favicon(client):
    assert client.get("/favicon.ico").status_code == 204


def test_store_error_details_only_in_development(tmp_path, monkeypatch):
    def broken(db):
        raise StoreError(details="connection reset")

    monkeypatch.setattr(repository, "list_summary", broken)

    for env, expect_details in (("production", False), ("development", True)):
        settings = Settings(
            database_url=f"sqlite:///{tmp_path / (env + '.db')}",
            upload_dir=str(tmp_path / env),
            app_env=env,
        )
        with TestClient(create_app(settings)) as client:
            resp = client.get("/api/all-users")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to fetch employees"
        assert ("details" in resp.json()) is expect_details


def test_health_reports_unreachable_store(client, monkeypatch):
    def down(engine):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(employee_router, "check_connection", down)
    resp = client.get("/api/health")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "status": "Error", "error": "Database connection failed"}


def test_startup_aborts_when_schema_cannot_be_verified(tmp_path):
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'missing' / 'nested' / 'db.sqlite'}",
        upload_dir=str(tmp_path / "uploads"),
    )
    with pytest.raises(SchemaBootstrapError):
        with TestClient(create_app(settings)):
            pass


def test_upload_dir_created_at_startup_not_at_construction(settings):
    app = create_app(settings)
    assert not os.path.exists(settings.upload_dir)
    with TestClient(app):
        assert os.path.isdir(settings.upload_dir)


def test_long_image_filename_is_accepted(client, make_form, settings):
    resp = client.post("/api/add-employee", data=make_form(), files=_png("a" * 240 + ".png"))
    assert resp.status_code == 201
    path = resp.json()["data"]["profileImage"]
    assert path.endswith("a.png") and len(path) <= 255
    assert _uploaded_files(settings) == [path.split("/", 1)[1]]
    assert client.get("/" + path).status_code == 200


def test_second_image_in_same_request_rejected(client, make_form, settings):
    files = [
        ("profileImage", ("one.png", b"\x89PNG1", "image/png")),
        ("profileImage", ("two.png", b"\x89PNG2", "image/png")),
    ]
    resp = client.post("/api/add-employee", data=make_form(), files=files)
    assert resp.status_code == 400
    assert resp.json()["code"] == "too_many_files"
    assert resp.json()["error"] == "Only one profile image may be uploaded"
    assert client.get("/api/all-users").json()["count"] == 0
    assert _uploaded_files(settings) == []
