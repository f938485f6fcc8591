"""
Configurações gerais do app de registro de corridas.
- Carrega variáveis de ambiente do arquivo .env na raiz do projeto
- Define valores padrão (dia de fechamento, metas, limites do teclado)
- Configura o logging da aplicação
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
env_path = PROJECT_ROOT / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

DATA_DIR = PROJECT_ROOT / "data"
LOG_DIR = PROJECT_ROOT / "logs"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENABLE_FILE_LOGGING = os.getenv("ENABLE_FILE_LOGGING", "false").lower() == "true"

CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "¥")

# Preferências do motorista (sobrescritas por data/preferences.json)
DEFAULT_CLOSING_DAY = 25
DEFAULT_MONTHLY_TARGET = 600000

# Meta sugerida ao abrir um turno
DEFAULT_SHIFT_TARGET = 30000

# Teclado de valores: no máximo 7 dígitos
MAX_FARE_DIGITS = 7
MAX_FARE = 9_999_999

LOGGER_NAME = "taxi_log"

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None, enable_file: bool | None = None) -> logging.Logger:
    """
    Configura o logger raiz da aplicação (taxi_log).
    Pode ser chamada a cada rerun do Streamlit: handlers não são duplicados.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level or LOG_LEVEL)
    logger.propagate = False

    if enable_file is None:
        enable_file = ENABLE_FILE_LOGGING

    formatter = logging.Formatter(_FORMAT)

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if enable_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / "taxi_log.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger filho de taxi_log (ex.: get_logger("repository") -> taxi_log.repository)."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
