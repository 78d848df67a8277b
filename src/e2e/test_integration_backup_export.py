import json
import zipfile
from pathlib import Path
import pytest
from autocorrect.engine import Engine
from autocorrect.models import ExportSuccess, LanguageBackup, NoWordsToExport

def _seed(tmp: Path) -> str:
    root = tmp / "dicts"
    root.mkdir()
    (root / "en.txt").write_text("hello\nworld\n", encoding="utf-8")
    (root / "id.txt").write_text("saya\nmakan\n", encoding="utf-8")
    (root / "en_contractions.txt").write_text("dont:don't\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_nothing_to_export(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path), backup_dir=tmp_path)
    try:
        eng.load(["en", "id"])
        assert isinstance(eng.export_backup(), NoWordsToExport)
        assert not list(tmp_path.glob("*.zip"))
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_export_writes_manifest_and_word_files(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        eng.load(["en", "id"])
        eng.add_word("flask", "en")
        out = tmp_path / "backup.zip"
        res = eng.export_backup(out)

        assert isinstance(res, ExportSuccess)
        assert res.path == str(out) and out.exists()
        assert res.word_count == 1
        assert res.manifest.version == 1
        assert res.manifest.languages == [LanguageBackup("en", 1, ["flask"])]

        with zipfile.ZipFile(out) as zf:
            names = set(zf.namelist())
            manifest = json.loads(zf.read("manifest.json"))
            assert zf.read("en.txt").decode("utf-8").split() == ["flask"]
        assert names == {"manifest.json", "en.txt"}
        assert manifest["version"] == 1
        assert isinstance(manifest["timestamp"], int)
        assert manifest["appVersion"]
        assert manifest["languages"] == [{"languageCode": "en", "wordCount": 1, "words": ["flask"]}]
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_export_to_directory_uses_timestamped_name(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        eng.load(["en", "id"])
        eng.add_word("flask", "en")
        eng.add_word("bakso", "id")
        outdir = tmp_path / "backups"
        outdir.mkdir()
        eng.codec.clock = lambda: 1700000000.0
        res = eng.export_backup(outdir)

        assert isinstance(res, ExportSuccess)
        name = Path(res.path).name
        assert name.startswith("custom_dictionary_backup_") and name.endswith(".zip")
        assert res.manifest.timestamp == 1700000000000
        assert res.word_count == 2
        assert [lb.language_code for lb in res.manifest.languages] == ["en", "id"]
        assert not list(outdir.glob("*.tmp"))
    finally:
        eng.shutdown()
