from pathlib import Path
import pytest
from autocorrect.engine import Engine
from autocorrect.models import AddWordStatus
from autocorrect.DB.api import make_store
from autocorrect.DB.memory_store import MemoryStore

def _seed(tmp: Path) -> str:
    root = tmp / "dicts"
    root.mkdir()
    (root / "en.txt").write_text("hello\nworld\n", encoding="utf-8")
    (root / "id.txt").write_text("saya\nmakan\n", encoding="utf-8")
    (root / "en_contractions.txt").write_text("dont:don't\n", encoding="utf-8")
    return str(root)

class _BrokenStore(MemoryStore):
    def save(self, language, words):
        raise OSError("disk full")

@pytest.mark.e2e
@pytest.mark.parametrize("kind", ["sqlite", "file"])
def test_custom_words_survive_restart(tmp_path: Path, kind: str):
    data = _seed(tmp_path)
    dsn = f"sqlite:///{tmp_path / 'custom.sqlite'}" if kind == "sqlite" else f"file://{tmp_path / 'custom'}"

    e1 = Engine(data_dir=data, db_dsn=dsn)
    e1.load(["en", "id"])
    assert e1.add_word("flask", "en").ok
    assert e1.add_word("django", "en").ok
    assert e1.add_word("bakso", "id").ok
    assert e1.remove_word("django", "en")
    e1.shutdown()

    e2 = Engine(data_dir=data, db_dsn=dsn)
    try:
        e2.load(["en", "id"])
        assert e2.contains("flask") and e2.contains("bakso")
        assert not e2.contains("django")
        assert e2.list_all_custom_words() == {"en": ["flask"], "id": ["bakso"]}
        assert [r.suggestion for r in e2.suggest("flsk")] == ["flask"]
    finally:
        e2.shutdown()

@pytest.mark.e2e
def test_storage_failure_leaves_memory_untouched(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path), backend=_BrokenStore())
    try:
        eng.load(["en", "id"])
        res = eng.add_word("flask", "en")
        assert res.status is AddWordStatus.ERROR
        assert "disk full" in res.message
        assert not eng.contains("flask")
        assert eng.list_custom_words("en") == []
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_seeded_backend_is_restored_on_load(tmp_path: Path):
    backend = MemoryStore({"en": ["flask", "x", "ok123"]})
    eng = Engine(data_dir=_seed(tmp_path), backend=backend)
    try:
        eng.load(["en", "id"])
        # invalid persisted entries are dropped on restore
        assert eng.list_custom_words("en") == ["flask"]
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_unknown_dsn_rejected():
    with pytest.raises(ValueError):
        make_store("postgres://nope")

@pytest.mark.e2e
def test_language_codes_cannot_escape_file_store(tmp_path: Path):
    store_dir = tmp_path / "store" / "custom"
    store_dir.mkdir(parents=True)
    victim = tmp_path / "victim.txt"
    victim.write_text("keep me\n", encoding="utf-8")
    sibling = tmp_path / "store" / "x.txt"
    sibling.write_text("keep me too\n", encoding="utf-8")

    eng = Engine(data_dir=_seed(tmp_path), db_dsn=f"file://{store_dir}")
    try:
        eng.load(["en", "id"])
        assert eng.add_word("flask", "en").ok

        assert not eng.clear_custom_words("../../victim")
        assert not eng.clear_custom_words("../x")
        assert not eng.remove_word("flask", "../en")
        assert eng.list_custom_words("../x") == []
        assert victim.exists() and sibling.exists()
        assert eng.list_custom_words("en") == ["flask"]
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_file_store_rejects_paths_outside_root(tmp_path: Path):
    store = make_store(f"file://{tmp_path / 'custom'}")
    for bad in ("../victim", "en/../../victim", "EN", ""):
        with pytest.raises(ValueError):
            store.save(bad, ["word"])
        with pytest.raises(ValueError):
            store.delete(bad)
    (tmp_path / "custom" / "notes.bak.txt").write_text("stray\n", encoding="utf-8")
    store.save("en", ["flask"])
    assert store.load_all() == {"en": ["flask"]}
