from pathlib import Path

from boggle_engine.settings import Settings, EDITABLE_FIELDS, update_settings, get_editable_settings


def _fresh_settings() -> Settings:
    """Create a fresh Settings instance for testing."""
    return Settings()


def test_defaults(monkeypatch):
    for name in ("MIN_WORD_LENGTH", "MAX_WORD_LENGTH", "NORMALIZE_QU", "BOARD_SIZE"):
        monkeypatch.delenv(name, raising=False)
    cfg = _fresh_settings()
    assert cfg.MIN_WORD_LENGTH == 3
    assert cfg.MAX_WORD_LENGTH == 16
    assert cfg.NORMALIZE_QU is True
    assert cfg.BOARD_SIZE == 4
    assert cfg.DICTIONARY_PATH == cfg.BASE_DIR / "dictionary.txt"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("MIN_WORD_LENGTH", "4")
    monkeypatch.setenv("NORMALIZE_QU", "no")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("DICTIONARY_PATH", str(tmp_path / "words.txt"))
    cfg = _fresh_settings()
    assert cfg.MIN_WORD_LENGTH == 4
    assert cfg.NORMALIZE_QU is False
    assert cfg.DEBUG is True
    assert cfg.DICTIONARY_PATH == Path(tmp_path / "words.txt")


def test_editable_fields_exist_on_settings():
    """All editable fields must be actual attributes on Settings."""
    cfg = _fresh_settings()
    for field_name in EDITABLE_FIELDS:
        assert hasattr(cfg, field_name), f"{field_name} not found on Settings"


def test_get_editable_settings():
    cfg = _fresh_settings()
    result = get_editable_settings(cfg)
    assert set(result.keys()) == set(EDITABLE_FIELDS.keys())
    assert result["NORMALIZE_QU"] == cfg.NORMALIZE_QU
    assert result["MAX_RESULTS"] == cfg.MAX_RESULTS


def test_update_int_field():
    cfg = _fresh_settings()
    errors = update_settings(cfg, BOARD_SIZE=5)
    assert errors == {}
    assert cfg.BOARD_SIZE == 5


def test_update_int_from_string():
    cfg = _fresh_settings()
    errors = update_settings(cfg, MAX_RESULTS="20")
    assert errors == {}
    assert cfg.MAX_RESULTS == 20


def test_update_bool_field():
    cfg = _fresh_settings()
    original = cfg.DEBUG
    errors = update_settings(cfg, DEBUG=not original)
    assert errors == {}
    assert cfg.DEBUG is (not original)


def test_update_bool_from_string():
    cfg = _fresh_settings()
    errors = update_settings(cfg, DEBUG="true")
    assert errors == {}
    assert cfg.DEBUG is True

    errors = update_settings(cfg, DEBUG="false")
    assert errors == {}
    assert cfg.DEBUG is False


def test_update_multiple_fields():
    cfg = _fresh_settings()
    errors = update_settings(cfg, MAX_RESULTS=10, MIN_WORD_LENGTH=4, MAX_WORD_LENGTH=8)
    assert errors == {}
    assert cfg.MAX_RESULTS == 10
    assert cfg.MIN_WORD_LENGTH == 4
    assert cfg.MAX_WORD_LENGTH == 8


def test_update_non_editable_field_returns_error():
    cfg = _fresh_settings()
    errors = update_settings(cfg, PORT=8000)
    assert "PORT" in errors


def test_update_unknown_field_returns_error():
    cfg = _fresh_settings()
    errors = update_settings(cfg, NONEXISTENT_FIELD=42)
    assert "NONEXISTENT_FIELD" in errors


def test_update_invalid_value_returns_error():
    cfg = _fresh_settings()
    original = cfg.MAX_RESULTS
    errors = update_settings(cfg, MAX_RESULTS="lots")
    assert "MAX_RESULTS" in errors
    assert cfg.MAX_RESULTS == original


def test_update_negative_value_returns_error():
    cfg = _fresh_settings()
    errors = update_settings(cfg, BOARD_SIZE=-1)
    assert "BOARD_SIZE" in errors


def test_update_partial_error():
    """Valid fields update even when invalid fields are present."""
    cfg = _fresh_settings()
    errors = update_settings(cfg, MAX_RESULTS=25, BAD_FIELD="nope")
    assert "BAD_FIELD" in errors
    assert cfg.MAX_RESULTS == 25


def test_min_length_cannot_exceed_max_length():
    cfg = _fresh_settings()
    cfg.MIN_WORD_LENGTH = 3
    cfg.MAX_WORD_LENGTH = 16
    errors = update_settings(cfg, MIN_WORD_LENGTH=10, MAX_WORD_LENGTH=5)
    assert "MIN_WORD_LENGTH" in errors
    assert cfg.MIN_WORD_LENGTH == 3
    assert cfg.MAX_WORD_LENGTH == 16
