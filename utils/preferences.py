"""
Carrega e salva as preferências do motorista (dia de fechamento e meta mensal).
Ficam em data/preferences.json; valores ausentes ou inválidos usam os padrões.
"""
import json
from pathlib import Path

from config.settings import DATA_DIR, DEFAULT_CLOSING_DAY, DEFAULT_MONTHLY_TARGET, get_logger

logger = get_logger("preferences")

PREFERENCES_PATH = DATA_DIR / "preferences.json"

CLOSING_DAY_KEY = "closing_day"
MONTHLY_TARGET_KEY = "monthly_target"

DEFAULTS = {
    CLOSING_DAY_KEY: DEFAULT_CLOSING_DAY,
    MONTHLY_TARGET_KEY: DEFAULT_MONTHLY_TARGET,
}


def validate_closing_day(value) -> int:
    day = int(value)
    if not 1 <= day <= 31:
        raise ValueError(f"Dia de fechamento deve estar entre 1 e 31 (recebido {value!r}).")
    return day


def validate_monthly_target(value) -> int:
    target = int(value)
    if target < 0:
        raise ValueError(f"Meta mensal não pode ser negativa (recebido {value!r}).")
    return target


_VALIDATORS = {
    CLOSING_DAY_KEY: validate_closing_day,
    MONTHLY_TARGET_KEY: validate_monthly_target,
}


def load_preferences(path: Path | None = None) -> dict:
    """Retorna as preferências (merge com defaults)."""
    path = path or PREFERENCES_PATH
    out = dict(DEFAULTS)
    if not path.exists():
        return out
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        logger.warning("Preferências ilegíveis em %s; usando padrões", path, exc_info=True)
        return out
    if not isinstance(data, dict):
        logger.warning("Preferências em formato inesperado em %s; usando padrões", path)
        return out

    for key, validator in _VALIDATORS.items():
        if key not in data:
            continue
        try:
            out[key] = validator(data[key])
        except (TypeError, ValueError):
            logger.warning("Preferência %s inválida (%r); usando %r", key, data[key], DEFAULTS[key])
    return out


def save_preferences(closing_day, monthly_target, path: Path | None = None) -> dict:
    """Valida e salva as preferências em data/preferences.json."""
    path = path or PREFERENCES_PATH
    prefs = {
        CLOSING_DAY_KEY: validate_closing_day(closing_day),
        MONTHLY_TARGET_KEY: validate_monthly_target(monthly_target),
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(prefs, f, ensure_ascii=False, indent=2)
    logger.info("Preferências salvas: %s", prefs)
    return prefs
