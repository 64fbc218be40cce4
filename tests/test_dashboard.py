from __future__ import annotations

import json

from kyoto_temples.config import PipelineConfig
from kyoto_temples.dashboard import create_app


def _client(config: PipelineConfig, base_path: str = "/"):
    app = create_app(config, base_path=base_path)
    app.config["TESTING"] = True
    return app.test_client()


def test_catalog_served(project: PipelineConfig) -> None:
    project.catalog_path.write_text(json.dumps({"temples": [{"id": "a"}]}), encoding="utf-8")

    resp = _client(project).get("/data/temples.json")

    assert resp.status_code == 200
    assert resp.get_json() == {"temples": [{"id": "a"}]}


def test_catalog_missing_and_malformed(project: PipelineConfig) -> None:
    client = _client(project)
    assert client.get("/data/temples.json").status_code == 404

    project.catalog_path.write_text(json.dumps({"sites": []}), encoding="utf-8")
    resp = client.get("/data/temples.json")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Invalid data format"}


def test_site_detail_resolves_image_urls(project: PipelineConfig) -> None:
    site = {"id": "kinkakuji", "images": ["data/images/a.jpg", "https://cdn.example/b.jpg"]}
    project.catalog_path.write_text(json.dumps({"temples": [site]}), encoding="utf-8")
    client = _client(project, base_path="/kyoto/")

    resp = client.get("/api/temples/kinkakuji")

    assert resp.get_json()["images"] == ["/kyoto/data/images/a.jpg", "https://cdn.example/b.jpg"]
    assert client.get("/api/temples/unknown").status_code == 404


def test_image_served(project: PipelineConfig) -> None:
    (project.images_dir / "a.jpg").write_bytes(b"jpegbytes")

    resp = _client(project).get("/data/images/a.jpg")

    assert resp.status_code == 200
    assert resp.data == b"jpegbytes"


def test_image_served_with_relative_root(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("KYOTO_TEMPLES_ROOT", "site")
    images = tmp_path / "site" / "public" / "data" / "images"
    images.mkdir(parents=True)
    (images / "a.jpg").write_bytes(b"jpegbytes")

    app = create_app()
    app.config["TESTING"] = True
    resp = app.test_client().get("/data/images/a.jpg")

    assert resp.status_code == 200
    assert resp.data == b"jpegbytes"
