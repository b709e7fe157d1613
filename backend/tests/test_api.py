"""HTTP surface: admin auth, codes, links, files, panels and uploads."""

from __future__ import annotations

import config
from auth import COOKIE_NAME

MB = 1024 * 1024


def _upload(client, admin_headers, content=b"payload", name="a.txt"):
    res = client.post(
        "/upload/admin",
        headers=admin_headers,
        files={"file": (name, content, "text/plain")},
    )
    assert res.status_code == 200, res.text
    return res.json()


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_admin_routes_require_secret(client):
    assert client.get("/api/files").status_code == 401
    assert client.get("/api/files", headers={"X-Admin-Secret": "wrong"}).status_code == 401
    assert client.post("/api/codes/upload", json={}).status_code == 401
    res = client.post("/upload/admin", files={"file": ("a.txt", b"x", "text/plain")})
    assert res.status_code == 401
    assert res.json() == {"detail": "Unauthorized"}


def test_unset_secret_refuses_admin_routes(client, monkeypatch, admin_headers):
    monkeypatch.setattr(config, "ADMIN_SECRET", "")

    res = client.get("/api/files", headers=admin_headers)

    assert res.status_code == 500
    assert res.json() == {"detail": "Server configuration error"}


def test_login_sets_session_cookie(client):
    assert client.get("/login", params={"auth": "wrong"}).status_code == 401

    res = client.get("/login", params={"auth": config.ADMIN_SECRET}, follow_redirects=False)

    assert res.status_code == 302
    assert res.headers["location"] == "/api/files"
    assert COOKIE_NAME in res.cookies
    assert client.get("/api/files").status_code == 200

    res = client.get("/logout", follow_redirects=False)
    assert res.headers["location"] == "/health"
    client.cookies.clear()
    assert client.get("/api/files").status_code == 401


def test_issue_and_probe_upload_code(client, admin_headers):
    res = client.post(
        "/api/codes/upload",
        headers=admin_headers,
        json={"max_uses": 3, "max_file_size_mb": 10},
    )
    assert res.status_code == 200
    issued = res.json()
    assert issued["max_uses"] == 3
    assert issued["upload_url"].endswith(f"/public?code={issued['code']}")

    probe = client.get(f"/api/codes/upload/{issued['code']}")
    assert probe.status_code == 200
    assert probe.json() == {"valid": True, "max_file_size_mb": 10, "remaining_uses": 3}

    assert client.get("/api/codes/upload/unknown").status_code == 404


def test_upload_code_rejects_zero_uses(client, admin_headers):
    res = client.post("/api/codes/upload", headers=admin_headers, json={"max_uses": 0})

    assert res.status_code == 422


def test_public_upload_flow(client, admin_headers, published):
    issued = client.post(
        "/api/codes/upload",
        headers=admin_headers,
        json={"max_uses": 1, "max_file_size_mb": 1},
    ).json()
    code = issued["code"]

    missing = client.post("/upload/public", data={"code": code})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "No file provided"

    no_code = client.post("/upload/public", files={"file": ("a.bin", b"x", "application/octet-stream")})
    assert no_code.status_code == 400
    assert no_code.json()["detail"] == "Upload code required"

    too_big = client.post(
        "/upload/public",
        data={"code": code},
        files={"file": ("big.bin", b"\0" * (2 * MB), "application/octet-stream")},
    )
    assert too_big.status_code == 413
    assert too_big.json()["detail"] == "File size exceeds 1MB limit"

    ok = client.post(
        "/upload/public",
        data={"code": code, "displayName": "From a friend"},
        files={"file": ("small.bin", b"abc", "application/octet-stream")},
    )
    assert ok.status_code == 200
    body = ok.json()
    assert body["success"] is True
    assert body["file"]["name"] == "From a friend"
    assert body["download_url"].endswith(f"/d/{body['download_code']}")

    again = client.post(
        "/upload/public",
        data={"code": code},
        files={"file": ("small.bin", b"abc", "application/octet-stream")},
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Invalid or expired upload code"
    assert [e.reason for e in published] == ["upload"]


def test_issue_and_list_download_links(client, admin_headers):
    file_id = _upload(client, admin_headers)["file"]["id"]

    res = client.post("/api/links/download", headers=admin_headers, json={"file_id": file_id})
    assert res.status_code == 200
    assert res.json()["max_downloads"] == 2

    links = client.get(f"/api/links/{file_id}", headers=admin_headers).json()
    assert len(links) == 2
    assert sorted(link["max_downloads"] or 0 for link in links) == [0, 2]

    missing = client.post("/api/links/download", headers=admin_headers, json={"file_id": "nope"})
    assert missing.status_code == 404


def test_list_and_delete_files(client, store, blobs, admin_headers, published):
    upload = _upload(client, admin_headers, content=b"12345")
    file_id = upload["file"]["id"]
    key = store.files.get(file_id).storage_key

    files = client.get("/api/files", headers=admin_headers).json()
    assert [f["id"] for f in files] == [file_id]
    assert files[0]["download_code"] == upload["download_code"]
    assert files[0]["size"] == 5

    assert client.delete(f"/api/files/{file_id}", headers=admin_headers).json() == {"success": True}
    assert not blobs.exists(key)
    assert client.get(f"/d/{upload['download_code']}").status_code == 404
    assert client.delete(f"/api/files/{file_id}", headers=admin_headers).status_code == 404
    assert [e.reason for e in published] == ["upload", "delete"]


def test_stats_and_manual_cleanup(client, clock, admin_headers):
    upload = _upload(client, admin_headers, content=b"abc")
    client.get(f"/d/{upload['download_code']}")

    stats = client.get("/api/stats", headers=admin_headers).json()
    assert stats["total_files"] == 1
    assert stats["total_storage"] == 3
    assert stats["total_downloads"] == 1
    assert stats["last_cleanup"] is None

    clock.advance(days=8)
    assert client.post("/api/cleanup", headers=admin_headers).json() == {"removed": 1}

    stats = client.get("/api/stats", headers=admin_headers).json()
    assert stats["total_files"] == 0
    assert stats["last_cleanup"] is not None


def test_panels_upsert_and_list(client, admin_headers):
    body = {"guild_id": "g1", "channel_id": "c1", "message_id": "m1"}
    first = client.put("/api/panels", headers=admin_headers, json=body).json()
    second = client.put(
        "/api/panels", headers=admin_headers, json={**body, "message_id": "m2"}
    ).json()

    assert second["id"] == first["id"]
    panels = client.get("/api/panels", headers=admin_headers).json()
    assert [p["message_id"] for p in panels] == ["m2"]
