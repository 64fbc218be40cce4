"""Read-only Flask server for the catalog and its images."""
from __future__ import annotations

from flask import Flask, abort, jsonify, send_from_directory

from kyoto_temples.catalog import load_catalog, resolve_image_url
from kyoto_temples.config import PipelineConfig
from kyoto_temples.errors import MalformedDocumentError, MissingInputError


def create_app(config: PipelineConfig | None = None, base_path: str = "/") -> Flask:
    config = config or PipelineConfig.load()
    app = Flask(__name__)

    def _sites():
        return load_catalog(config.catalog_path)

    @app.route("/data/temples.json", methods=["GET"])
    def catalog():
        try:
            sites = _sites()
        except MissingInputError:
            return jsonify({"error": "catalog not found"}), 404
        except MalformedDocumentError as e:
            return jsonify({"error": e.reason}), 500
        return jsonify({"temples": sites})

    @app.route("/data/images/<path:filename>", methods=["GET"])
    def image(filename):
        # Flask resolves relative directories against the package, not the cwd
        return send_from_directory(config.images_dir.resolve(), filename)

    @app.route("/api/temples/<site_id>", methods=["GET"])
    def site_detail(site_id):
        try:
            sites = _sites()
        except MissingInputError:
            return jsonify({"error": "catalog not found"}), 404
        except MalformedDocumentError as e:
            return jsonify({"error": e.reason}), 500
        for site in sites:
            if site.get("id") == site_id:
                payload = dict(site)
                payload["images"] = [resolve_image_url(p, base_path) for p in site.get("images") or []]
                return jsonify(payload)
        abort(404)

    return app


def main() -> int:
    create_app().run(host="127.0.0.1", port=5000)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
