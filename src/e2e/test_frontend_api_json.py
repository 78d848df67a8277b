import io
import json
import zipfile
from pathlib import Path
import pytest
from autocorrect.engine import Engine
from frontend.web import app as flask_app

def _seed(tmp: Path) -> str:
    root = tmp / "dicts"; root.mkdir()
    (root / "en.txt").write_text("hello\nworld\nhelp\n", encoding="utf-8")
    (root / "id.txt").write_text("saya\nmakan\n", encoding="utf-8")
    (root / "en_contractions.txt").write_text("dont:don't\n", encoding="utf-8")
    return str(root)

@pytest.fixture
def client(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path), backup_dir=tmp_path)
    eng.load(["en", "id"])

    import frontend.web as webmod
    webmod._engine = eng
    yield flask_app.test_client()
    webmod._engine = None
    eng.shutdown()

@pytest.mark.e2e
def test_health(client):
    rv = client.get("/api/health")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["ok"] is True
    assert data["languages"] == ["en", "id"]
    assert data["custom_words"] == 0

@pytest.mark.e2e
def test_suggest_api_json(client):
    rv = client.get("/api/suggest?q=dont&k=3")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["auto_apply"] is True
    first = data["suggestions"][0]
    for key in ("original", "suggestion", "confidence", "source", "metadata"):
        assert key in first
    assert first["suggestion"] == "don't" and first["source"] == "contraction"
    assert first["metadata"]["is_contraction"] is True

    rv = client.get("/api/suggest?q=helo&context=hello,world")
    rows = rv.get_json()["suggestions"]
    assert [r["suggestion"] for r in rows] == ["help", "hello"]
    assert rows[1]["confidence"] == pytest.approx(0.9)

    assert client.get("/api/suggest?q=").get_json() == {"suggestions": [], "auto_apply": False}
    assert client.get("/api/ignore?q=NASA").get_json()["ignore"] is True

@pytest.mark.e2e
def test_word_routes(client):
    rv = client.post("/api/words", json={"word": "flask", "language": "en"})
    assert rv.status_code == 201 and rv.get_json()["status"] == "added"
    assert client.post("/api/words", json={"word": "flask", "language": "en"}).status_code == 409
    assert client.post("/api/words", json={"word": "x", "language": "en"}).status_code == 422
    assert client.post("/api/words", json={}).status_code == 400

    assert client.get("/api/words").get_json() == {"en": ["flask"]}
    assert client.get("/api/words?language=id").get_json() == {"id": []}

    assert client.delete("/api/words/en/flask").status_code == 200
    assert client.delete("/api/words/en/flask").status_code == 404

    client.post("/api/words", json={"word": "bakso", "language": "id"})
    assert client.delete("/api/words?language=../../victim").status_code == 422
    assert client.delete("/api/words").status_code == 200
    assert client.get("/api/words").get_json() == {}

@pytest.mark.e2e
def test_export_and_import_routes(client):
    assert client.get("/api/export").status_code == 404

    client.post("/api/words", json={"word": "flask", "language": "en"})
    rv = client.get("/api/export")
    assert rv.status_code == 200
    assert rv.mimetype == "application/zip"
    with zipfile.ZipFile(io.BytesIO(rv.data)) as zf:
        manifest = json.loads(zf.read("manifest.json"))
    assert manifest["languages"][0]["words"] == ["flask"]

    manifest["languages"] = [{"languageCode": "id", "wordCount": 1, "words": ["bakso"]}]
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("manifest.json", json.dumps(manifest))
    rv = client.post("/api/import?mode=merge",
                     data={"file": (io.BytesIO(buf.getvalue()), "b.zip")},
                     content_type="multipart/form-data")
    assert rv.status_code == 200
    body = rv.get_json()
    assert body["added_words"] == 1
    assert body["language_breakdown"]["id"] == {"added": 1, "skipped": 0, "errors": 0}
    assert client.get("/api/words").get_json() == {"en": ["flask"], "id": ["bakso"]}

    manifest["version"] = 9
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("manifest.json", json.dumps(manifest))
    rv = client.post("/api/import", data={"file": (io.BytesIO(buf.getvalue()), "b.zip")},
                     content_type="multipart/form-data")
    assert rv.status_code == 409

    rv = client.post("/api/import", data={"file": (io.BytesIO(b"junk"), "b.zip")},
                     content_type="multipart/form-data")
    assert rv.status_code == 400
    assert client.post("/api/import").status_code == 400
