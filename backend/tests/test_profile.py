import pytest

from conftest import auth_headers, register
from wall.core.exceptions import ConflictError, NotFoundError
from wall.repositories.profile_repository import ProfileRepository
from wall.services.profile_service import ProfileService


@pytest.fixture
def profile_service(db):
    return ProfileService(ProfileRepository(db))


class TestProfileService:
    def test_update_merges_only_given_fields(self, profile_service):
        profile = profile_service.create({"email": "alice@x.com", "first_name": "Alice", "about": "hello"})

        updated = profile_service.update(profile.id, {"last_name": "Liddell"})

        assert updated.first_name == "Alice"
        assert updated.last_name == "Liddell"
        assert updated.about == "hello"

    def test_update_ignores_credentials(self, profile_service):
        profile = profile_service.create({"email": "alice@x.com"})

        updated = profile_service.update(profile.id, {"email": "evil@x.com", "password_hash": "x", "phone": "123"})

        assert updated.email == "alice@x.com"
        assert updated.password_hash == ""
        assert updated.phone == "123"

    def test_update_avatar_touches_only_avatar(self, profile_service):
        profile = profile_service.create({"email": "alice@x.com", "about": "hello"})

        updated = profile_service.update_avatar(profile.id, "face.png")

        assert updated.avatar == "face.png"
        assert updated.about == "hello"

    def test_missing_profile_is_not_found(self, profile_service):
        with pytest.raises(NotFoundError):
            profile_service.get(5)
        with pytest.raises(NotFoundError):
            profile_service.update(5, {"about": "x"})
        with pytest.raises(NotFoundError):
            profile_service.update_avatar(5, "x.png")

    def test_create_with_taken_email_conflicts(self, profile_service):
        profile_service.create({"email": "alice@x.com"})

        with pytest.raises(ConflictError):
            profile_service.create({"email": "alice@x.com"})


class TestProfileRoutes:
    def test_get_profile(self, client):
        auth = register(client)
        headers = auth_headers(auth["access_token"])

        resp = client.get("/api/profile/1", headers=headers)

        assert resp.status_code == 200
        assert resp.json() == auth["user"]

    def test_get_missing_profile_is_404(self, client):
        headers = auth_headers(register(client)["access_token"])

        assert client.get("/api/profile/99", headers=headers).status_code == 404

    def test_put_accepts_camel_case_partial_update(self, client):
        headers = auth_headers(register(client)["access_token"])

        resp = client.put(
            "/api/profile/1",
            json={"firstName": "Alice", "birthDate": "1990-05-17"},
            headers=headers,
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["firstName"] == "Alice"
        assert body["birthDate"] == "1990-05-17"
        assert body["lastName"] == ""

    def test_avatar_upload(self, client, upload_storage):
        headers = auth_headers(register(client)["access_token"])

        resp = client.post(
            "/api/profile/1/avatar",
            files={"file": ("me.png", b"\x89PNG....", "image/png")},
            headers=headers,
        )

        assert resp.status_code == 200
        avatar = resp.json()["avatar"]
        assert avatar.endswith(".png")
        assert upload_storage.file_exists(avatar)

    def test_avatar_rejects_non_images(self, client):
        headers = auth_headers(register(client)["access_token"])

        resp = client.post(
            "/api/profile/1/avatar",
            files={"file": ("me.pdf", b"%PDF", "application/pdf")},
            headers=headers,
        )

        assert resp.status_code == 400

    def test_avatar_rejects_oversized_files(self, client, upload_storage):
        headers = auth_headers(register(client)["access_token"])
        oversized = b"\x00" * (upload_storage.max_file_size + 1)

        resp = client.post(
            "/api/profile/1/avatar",
            files={"file": ("big.png", oversized, "image/png")},
            headers=headers,
        )

        assert resp.status_code == 400
        assert upload_storage.list_files() == []

    def test_create_profile_route(self, client):
        headers = auth_headers(register(client)["access_token"])

        resp = client.post("/api/profile", json={"email": "bob@x.com", "firstName": "Bob"}, headers=headers)

        assert resp.status_code == 201
        assert resp.json()["firstName"] == "Bob"
        assert resp.json()["id"] == 2
