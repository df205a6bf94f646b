"""HTTP tests for the API routes against the in-memory Supabase fake."""
from app.config import settings
from tests.conftest import TEST_EMAIL, TEST_TOKEN, TEST_USER_ID

API = "/api/v1"
STORAGE_URL = "https://test.supabase.co/storage/v1/object/public"


def seed_profile(fake_supabase, **overrides):
    row = {
        "id": TEST_USER_ID, "name": "Merlin", "email": TEST_EMAIL, "profile": "",
        "bio": "Card tricks", "created_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    fake_supabase.tables["users"] = [row]
    return row


class TestHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["message"] == "Welcome to ContentGen Pro"

    def test_health_has_security_headers(self, client):
        response = client.get("/health")
        assert response.json() == {"status": "healthy"}
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_ready_needs_supabase(self, client, monkeypatch):
        monkeypatch.setattr(settings, "supabase_url", "")
        assert client.get("/ready").status_code == 503

        monkeypatch.setattr(settings, "supabase_url", "https://test.supabase.co")
        monkeypatch.setattr(settings, "supabase_key", "anon")
        monkeypatch.setattr(settings, "claude_api_key", None)
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "trick_generation": False}


class TestAuthRoutes:
    def test_register(self, client, fake_supabase):
        response = client.post(f"{API}/auth/register", json={
            "email": "new@example.com", "password": "pw123456", "name": " Houdini ", "bio": "Escapes",
        })

        assert response.status_code == 201
        assert response.json()["message"] == "Check your email for verification link!"
        metadata = fake_supabase.auth.signed_up[0]["options"]["data"]
        assert metadata == {"name": "Houdini", "bio": "Escapes"}

    def test_register_blank_name(self, client):
        response = client.post(f"{API}/auth/register", json={
            "email": "new@example.com", "password": "pw123456", "name": "  ",
        })
        assert response.status_code == 422

    def test_register_existing_user(self, client, fake_supabase):
        fake_supabase.auth.sign_up_error = Exception("User already registered")
        response = client.post(f"{API}/auth/register", json={
            "email": TEST_EMAIL, "password": "pw123456", "name": "Merlin",
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "User already exists"

    def test_login_creates_missing_profile(self, client, fake_supabase):
        response = client.post(f"{API}/auth/login", json={"email": TEST_EMAIL, "password": "correct-horse"})

        assert response.status_code == 200
        body = response.json()
        assert body["access_token"] == TEST_TOKEN
        assert body["redirect_to"] == "/magic-tricks"
        assert fake_supabase.tables["users"][0]["name"] == "Merlin"

    def test_login_wrong_password(self, client):
        response = client.post(f"{API}/auth/login", json={"email": TEST_EMAIL, "password": "nope"})
        assert response.status_code == 401

    def test_me_after_login_comes_from_cache(self, client, fake_supabase, auth_headers):
        client.post(f"{API}/auth/login", json={"email": TEST_EMAIL, "password": "correct-horse"})

        response = client.get(f"{API}/auth/me", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["restored_from_cache"] is True
        assert body["user"]["id"] == TEST_USER_ID
        assert body["profile"]["name"] == "Merlin"
        assert fake_supabase.auth.get_user_calls == 0

    def test_me_without_cache_asks_supabase(self, client, fake_supabase, auth_headers):
        seed_profile(fake_supabase)
        response = client.get(f"{API}/auth/me", headers=auth_headers)

        assert response.json()["restored_from_cache"] is False
        assert fake_supabase.auth.get_user_calls == 1

    def test_invalid_token(self, client):
        response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer bogus"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    def test_missing_token(self, client):
        response = client.get(f"{API}/auth/me")
        assert response.status_code in (401, 403)

    def test_logout_clears_cache(self, client, fake_supabase, session_store, auth_headers):
        client.post(f"{API}/auth/login", json={"email": TEST_EMAIL, "password": "correct-horse"})
        assert session_store

        response = client.post(f"{API}/auth/logout", headers=auth_headers)

        assert response.status_code == 200
        assert session_store == {}
        assert fake_supabase.auth.signed_out == [TEST_TOKEN]


class TestUserRoutes:
    def test_update_profile(self, client, fake_supabase, auth_headers):
        seed_profile(fake_supabase)
        response = client.put(f"{API}/users/me", headers=auth_headers, json={"name": "Zatanna", "bio": "Stage"})

        assert response.status_code == 200
        assert response.json()["name"] == "Zatanna"

    def test_new_picture_replaces_old_upload(self, client, fake_supabase, auth_headers):
        old_path = f"{TEST_USER_ID}/profile_1.png"
        seed_profile(fake_supabase, profile=f"{STORAGE_URL}/profile_pictures/{old_path}")
        fake_supabase.storage.objects["profile_pictures"] = {old_path: b"png"}
        new_url = f"{STORAGE_URL}/profile_pictures/{TEST_USER_ID}/profile_2.png"

        response = client.put(f"{API}/users/me", headers=auth_headers, json={"profile": new_url})

        assert response.status_code == 200
        assert response.json()["profile"] == new_url
        assert fake_supabase.storage.removed == [("profile_pictures", old_path)]

    def test_same_picture_is_kept(self, client, fake_supabase, auth_headers):
        url = f"{STORAGE_URL}/profile_pictures/{TEST_USER_ID}/profile_1.png"
        seed_profile(fake_supabase, profile=url)
        fake_supabase.storage.objects["profile_pictures"] = {f"{TEST_USER_ID}/profile_1.png": b"png"}

        client.put(f"{API}/users/me", headers=auth_headers, json={"profile": url, "bio": "New"})

        assert fake_supabase.storage.removed == []

    def test_update_profile_bio_too_long(self, client, fake_supabase, auth_headers):
        seed_profile(fake_supabase)
        response = client.put(f"{API}/users/me", headers=auth_headers, json={"bio": "x" * 501})
        assert response.status_code == 422

    def test_public_profile(self, client, fake_supabase):
        seed_profile(fake_supabase)
        response = client.get(f"{API}/users/{TEST_USER_ID}")
        assert response.status_code == 200
        assert response.json()["bio"] == "Card tricks"

    def test_upload_picture(self, client, fake_supabase, auth_headers):
        response = client.post(
            f"{API}/users/me/picture", headers=auth_headers,
            files={"file": ("me.webp", b"webp-bytes", "image/webp")},
        )

        assert response.status_code == 201
        assert response.json()["path"].startswith(f"{TEST_USER_ID}/profile_")
        assert fake_supabase.storage.uploads[0][0] == "profile_pictures"

    def test_upload_picture_wrong_type(self, client, auth_headers):
        response = client.post(
            f"{API}/users/me/picture", headers=auth_headers,
            files={"file": ("me.pdf", b"%PDF", "application/pdf")},
        )
        assert response.status_code == 400


class TestTrickRoutes:
    def test_add_then_filter(self, client, auth_headers):
        created = client.post(f"{API}/tricks", headers=auth_headers, json={
            "title": "Coin Roll", "description": "Roll a coin", "difficulty": "Medium",
            "instructions_text": "Hold\nRoll",
        })
        assert created.status_code == 201
        assert created.json()["created_by_me"] is True

        mine = client.get(f"{API}/tricks", headers=auth_headers, params={"filter": "Created by me"})
        assert [t["title"] for t in mine.json()["tricks"]] == ["Coin Roll"]

        easy = client.get(f"{API}/tricks", headers=auth_headers, params={"filter": "Easy"})
        assert easy.json()["tricks"] == []

    def test_items(self, client, auth_headers):
        response = client.get(f"{API}/tricks/items", headers=auth_headers)
        assert "Playing cards" in response.json()["items"]

    def test_generate_and_save(self, client, auth_headers):
        generated = client.post(f"{API}/tricks/generate", headers=auth_headers, json={
            "items": ["Coins", "Cups"], "difficulty": "Easy",
        })
        assert generated.status_code == 200
        trick = generated.json()["trick"]
        assert trick["title"] == "Coin Through Cup"

        saved = client.post(f"{API}/tricks/generated", headers=auth_headers, json=trick)
        assert saved.status_code == 201
        assert saved.json()["instructions"] == ["Show the coin", "Cover it", "Reveal it"]

    def test_get_update_delete(self, client, auth_headers):
        trick_id = client.post(f"{API}/tricks", headers=auth_headers, json={
            "title": "Vanish", "description": "Gone",
        }).json()["id"]

        assert client.get(f"{API}/tricks/{trick_id}", headers=auth_headers).json()["title"] == "Vanish"

        updated = client.put(f"{API}/tricks/{trick_id}", headers=auth_headers, json={"overall_rating": 4.5})
        assert updated.json()["overall_rating"] == 4.5

        assert client.delete(f"{API}/tricks/{trick_id}", headers=auth_headers).status_code == 204
        assert client.get(f"{API}/tricks/{trick_id}", headers=auth_headers).status_code == 404

    def test_rating_out_of_range(self, client, auth_headers):
        response = client.put(f"{API}/tricks/any", headers=auth_headers, json={"overall_rating": 6})
        assert response.status_code == 422

    def test_blank_title_on_update(self, client, auth_headers):
        response = client.put(f"{API}/tricks/any", headers=auth_headers, json={"title": "   "})
        assert response.status_code == 422


class TestMediaRoutes:
    def test_upload_video(self, client, fake_supabase, auth_headers):
        response = client.post(
            f"{API}/media", headers=auth_headers,
            files={"file": ("clip.webm", b"webm-bytes", "video/webm")},
            data={"type": "video"},
        )
        assert response.status_code == 201
        assert response.json()["path"].endswith(".webm")

    def test_delete(self, client, fake_supabase, auth_headers):
        path = f"{TEST_USER_ID}/video_1.mp4"
        fake_supabase.storage.objects["user_videos"] = {path: b"mp4"}

        response = client.delete(f"{API}/media/video_1.mp4", headers=auth_headers)

        assert response.status_code == 204
        assert fake_supabase.storage.removed == [("user_videos", path)]

    def test_delete_missing_file(self, client, auth_headers):
        response = client.delete(f"{API}/media/does-not-exist.mp4", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "File not found"

    def test_list_empty(self, client, auth_headers):
        response = client.get(f"{API}/media", headers=auth_headers)
        assert response.json() == []
