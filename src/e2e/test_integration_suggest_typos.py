from pathlib import Path
import pytest
from autocorrect.engine import Engine
from autocorrect.models import SuggestionSource

def _seed(tmp: Path) -> str:
    root = tmp / "dicts"
    root.mkdir()
    (root / "en.txt").write_text("hello\nworld\nhelp\nthe\nhouse\nquick\nbrown\n", encoding="utf-8")
    (root / "id.txt").write_text("teh\nkopi\nrumah\nmakan\nsaya\n", encoding="utf-8")
    (root / "en_contractions.txt").write_text("dont:don't\ncant:can't\n", encoding="utf-8")
    return str(root)

@pytest.mark.e2e
def test_single_edit_typos_find_dictionary_words(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        assert eng.load(["en", "id"]).ok
        rows = eng.suggest("helo")
        words = [r.suggestion for r in rows]
        assert "hello" in words and "help" in words
        # o/p are neighbours, so "help" gets the proximity boost and ranks first
        assert words[0] == "help"
        assert rows[0].source is SuggestionSource.KEYBOARD_PROXIMITY
        assert rows[0].confidence == pytest.approx(0.8 + 0.15 * 0.9)

        hello = next(r for r in rows if r.suggestion == "hello")
        assert hello.source is SuggestionSource.DICTIONARY
        assert hello.metadata.edit_distance == 1
        assert hello.metadata.language == "en"
        assert hello.confidence == pytest.approx(0.8)

        assert [r.suggestion for r in eng.suggest("wrld")] == ["world"]
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_known_words_and_blank_tokens_get_nothing(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        eng.load(["en", "id"])
        assert eng.suggest("hello") == []
        assert eng.suggest("HELLO") == []
        # "teh" is an Indonesian word, never an English typo here
        assert eng.suggest("teh") == []
        assert eng.suggest("") == []
        assert eng.suggest("   ") == []
        assert eng.suggest("helo", max_results=0) == []
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_results_sorted_capped_and_above_threshold(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        eng.load(["en", "id"])
        rows = eng.suggest("helo", max_results=1)
        assert len(rows) == 1
        rows = eng.suggest("hous")
        confs = [r.confidence for r in rows]
        assert confs == sorted(confs, reverse=True)
        assert all(0.5 <= c <= 1.0 for c in confs)
        assert all(r.metadata.edit_distance <= 2 for r in rows)
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_suggestions_keep_the_typed_case(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        eng.load(["en", "id"])
        assert "Hello" in [r.suggestion for r in eng.suggest("Helo")]
        assert "HELLO" in [r.suggestion for r in eng.suggest("HELO")]
        assert all(r.original == "Helo" for r in eng.suggest("Helo"))
    finally:
        eng.shutdown()

@pytest.mark.e2e
def test_suggest_before_load_raises(tmp_path: Path):
    eng = Engine(data_dir=_seed(tmp_path))
    try:
        with pytest.raises(RuntimeError):
            eng.suggest("helo")
    finally:
        eng.shutdown()
