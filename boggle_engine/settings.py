import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    BASE_DIR: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)

    DICTIONARY_PATH: Path = field(init=False)
    BOARDS_PATH: Path = field(init=False)

    MIN_WORD_LENGTH: int = 3
    MAX_WORD_LENGTH: int = 16
    NORMALIZE_QU: bool = True

    BOARD_SIZE: int = 4
    MAX_BOARD_SIZE: int = 16
    MAX_RESULTS: int = 50
    DEBUG: bool = False
    PORT: int = 10001

    def __post_init__(self):
        self.DICTIONARY_PATH = self.BASE_DIR / "dictionary.txt"
        self.BOARDS_PATH = self.BASE_DIR / "boards.txt"

        # Override from environment
        for fld in self.__dataclass_fields__:
            env_val = os.environ.get(fld)
            if env_val is not None:
                setattr(self, fld, _coerce(getattr(self, fld), env_val))


def _coerce(current, value):
    if isinstance(current, bool):
        if isinstance(value, bool):
            return value
        return str(value).lower() in ("1", "true", "yes")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    if isinstance(current, Path):
        return Path(value)
    return str(value)


# Fields that may be changed at runtime through /api/settings
EDITABLE_FIELDS: dict[str, type] = {
    "MIN_WORD_LENGTH": int,
    "MAX_WORD_LENGTH": int,
    "NORMALIZE_QU": bool,
    "BOARD_SIZE": int,
    "MAX_RESULTS": int,
    "DEBUG": bool,
}

# Changing any of these requires rebuilding the dictionary index
DICTIONARY_FIELDS = frozenset({"MIN_WORD_LENGTH", "MAX_WORD_LENGTH", "NORMALIZE_QU"})


def get_editable_settings(cfg: Settings) -> dict:
    return {name: getattr(cfg, name) for name in EDITABLE_FIELDS}


def update_settings(cfg: Settings, **values) -> dict[str, str]:
    """Apply valid values to ``cfg``. Returns an error message per rejected field."""
    errors: dict[str, str] = {}
    staged: dict = {}
    for name, value in values.items():
        if name not in EDITABLE_FIELDS:
            errors[name] = "not an editable setting"
            continue
        try:
            coerced = _coerce(getattr(cfg, name), value)
        except (TypeError, ValueError) as e:
            errors[name] = f"invalid {EDITABLE_FIELDS[name].__name__}: {e}"
            continue
        if isinstance(coerced, int) and not isinstance(coerced, bool) and coerced < 0:
            errors[name] = "must not be negative"
            continue
        staged[name] = coerced

    min_len = staged.get("MIN_WORD_LENGTH", cfg.MIN_WORD_LENGTH)
    max_len = staged.get("MAX_WORD_LENGTH", cfg.MAX_WORD_LENGTH)
    if min_len > max_len:
        errors["MIN_WORD_LENGTH"] = "must not exceed MAX_WORD_LENGTH"
        staged.pop("MIN_WORD_LENGTH", None)
        staged.pop("MAX_WORD_LENGTH", None)

    for name, value in staged.items():
        setattr(cfg, name, value)
    return errors


settings = Settings()
