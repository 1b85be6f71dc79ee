import os

import models


def _upload_image(client, headers, content, location="Uppal", filename="crowd.png", content_type="image/png"):
    return client.post(
        "/api/upload/image",
        files={"file": (filename, content, content_type)},
        data={"location": location},
        headers=headers,
    )


def test_image_upload_creates_analysis(client, db, user, user_headers, png_bytes):
    response = _upload_image(client, user_headers, png_bytes)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Image uploaded and analyzed successfully"
    results = body["analysis"]["results"]
    assert 50 <= results["density"] <= 80
    assert results["hotspots"]
    assert results["anomalies"] in ([], ["Unusual gathering", "Rapid movement"])
    assert results["media"] == {"width": 64, "height": 48, "format": "PNG"}

    stored = db.query(models.Analysis).one()
    assert stored.user_id == user.id
    assert stored.file_type == "image"
    assert stored.location == "Uppal"
    assert os.path.exists(stored.file_path)
    assert stored.file_path.endswith("-crowd.png")


def test_video_upload_builds_frame_timeline(client, user_headers):
    response = client.post(
        "/api/upload/video",
        files={"file": ("clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")},
        data={"location": "Miyapur"},
        headers=user_headers,
    )

    assert response.status_code == 200
    results = response.json()["analysis"]["results"]
    assert 50 <= results["averageDensity"] <= 80
    assert 75 <= results["peakDensity"] <= 90
    peak_frames = [f for f in results["frames"] if f["density"] == results["peakDensity"]]
    assert [f["timestamp"] for f in peak_frames] == [results["peakTime"]]


def test_upload_rejects_unlisted_mime_type(client, user_headers):
    response = _upload_image(client, user_headers, b"GIF89a", filename="a.gif", content_type="image/gif")
    assert response.status_code == 400
    assert "Invalid file type" in response.json()["detail"]


def test_image_endpoint_rejects_video(client, user_headers):
    response = _upload_image(client, user_headers, b"data", filename="a.mp4", content_type="video/mp4")
    assert response.status_code == 400


def test_upload_requires_location(client, user_headers, png_bytes):
    response = client.post(
        "/api/upload/image",
        files={"file": ("crowd.png", png_bytes, "image/png")},
        headers=user_headers,
    )
    assert response.status_code == 422


def test_upload_requires_auth(client, png_bytes):
    assert _upload_image(client, {}, png_bytes).status_code == 401


def test_oversized_upload_rejected(client, user_headers, monkeypatch):
    from config import config
    monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 10)

    response = _upload_image(client, user_headers, b"\x89PNG" + b"0" * 64)
    assert response.status_code == 413


def test_unsafe_filename_is_sanitized(client, db, user_headers, png_bytes):
    response = _upload_image(client, user_headers, png_bytes, filename="../../etc/evil name.png")
    assert response.status_code == 200

    stored = db.query(models.Analysis).one()
    assert os.path.basename(stored.file_path).endswith("-evil_name.png")
    assert os.path.dirname(stored.file_path) == os.environ["UPLOAD_DIR"]


def test_upload_rate_limit(client, user_headers, png_bytes):
    statuses = [_upload_image(client, user_headers, png_bytes).status_code for _ in range(11)]

    assert statuses[:10] == [200] * 10
    assert statuses[10] == 429


def test_rate_limited_response_has_headers(client, user_headers, png_bytes):
    for _ in range(10):
        _upload_image(client, user_headers, png_bytes)
    response = _upload_image(client, user_headers, png_bytes)

    assert response.json()["detail"] == "Too many upload requests from this IP, please try again after a minute"
    assert response.headers["RateLimit-Remaining"] == "0"
    assert "Retry-After" in response.headers


def test_livestream_records_live_analysis(client, db, user_headers):
    response = client.post("/api/livestream", json={"location": "Charminar"}, headers=user_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Live feed connection established"
    assert body["connectionId"].startswith("live-")
    assert len(body["connectionId"]) == len("live-") + 8

    stored = db.query(models.Analysis).one()
    assert stored.file_type == "live"
    assert stored.file_path is None
    assert stored.results["connectionId"] == body["connectionId"]


def test_blank_livestream_location_rejected(client, db, user_headers):
    response = client.post("/api/livestream", json={"location": "   "}, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Location is required"
    assert db.query(models.Analysis).count() == 0


def test_failed_analysis_removes_stored_file(client, db, user_headers, png_bytes, monkeypatch, tmp_path):
    from config import config
    from routers import upload

    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_DIR", str(upload_dir))

    def broken_analysis(file_path, file_type):
        raise RuntimeError("analysis failed")

    monkeypatch.setattr(upload, "analyze_media_file", broken_analysis)

    response = _upload_image(client, user_headers, png_bytes)

    assert response.status_code == 500
    assert response.json()["detail"] == "Server error during image upload"
    assert os.listdir(upload_dir) == []
    assert db.query(models.Analysis).count() == 0
