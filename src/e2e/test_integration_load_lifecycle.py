from pathlib import Path
import pytest
from autocorrect.engine import Engine
from autocorrect.DB.memory_store import MemoryStore

def _seed(tmp: Path) -> str:
    root = tmp / "dicts"
    root.mkdir()
    (root / "en.txt").write_text("Hello\nworld\n\nhello\n  help  \n", encoding="utf-8")
    (root / "id.txt").write_text("saya\nmakan\n", encoding="utf-8")
    (root / "en_contractions.txt").write_text("dont:don't\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_missing_language_fails_whole_load(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        res = eng.load(["en", "fr"])
        assert not res.ok
        assert res.missing == ["fr"] and res.loaded == []
        assert not eng.is_ready
        # nothing from the good language was applied either
        assert not eng.contains("hello")
        assert eng.store.loaded_languages == []
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_word_lists_are_trimmed_lowercased_and_deduped(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        res = eng.load(["en", "id"])
        assert res.ok and res.loaded == ["en", "id"]
        assert eng.store.words_for_language("en") == ["hello", "world", "help"]
        assert eng.store.active_languages == ["en", "id"]
        assert eng.store.is_builtin("HELP", "en")
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_background_load_makes_engine_ready(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        fut = eng.load_async(["en", "id"])
        res = fut.result(timeout=10)
        assert res.ok
        assert eng.is_ready
        assert [r.suggestion for r in eng.suggest("wrld")] == ["world"]
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_shutdown_resets_ready(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    eng.load(["en"])
    assert eng.is_ready
    eng.shutdown()
    assert not eng.is_ready

class _UnreadableStore(MemoryStore):
    def load_all(self):
        raise OSError("permission denied")

@pytest.mark.e2e
def test_failed_reload_keeps_earlier_dictionaries(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        assert eng.load(["en", "id"]).ok
        res = eng.load(["en", "fr"])
        assert not res.ok and res.missing == ["fr"]
        assert eng.is_ready
        assert eng.store.loaded_languages == ["en", "id"]
        assert [r.suggestion for r in eng.suggest("wrld")] == ["world"]
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_unreadable_custom_store_is_reported(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path), backend=_UnreadableStore())
    try:
        res = eng.load(["en", "id"])
        assert res.ok and eng.is_ready
        assert res.custom_restored is False
        assert eng.list_all_custom_words() == {}
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_custom_restore_flag_set_on_success(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path), backend=MemoryStore({"en": ["flask"]}))
    try:
        res = eng.load(["en", "id"])
        assert res.custom_restored is True
        assert eng.contains("flask")
    finally:
        eng.shutdown()
