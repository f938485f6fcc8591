"""
Criação do repositório (uma vez por processo) e do ciclo de vida do turno.
"""
from typing import Optional

import streamlit as st
from sqlalchemy.exc import SQLAlchemyError

from config.database import create_db_engine, create_session_factory, init_db, resolve_database_url
from config.settings import get_logger, setup_logging
from services.shift_repository import ShiftRepository
from services.shift_service import ShiftLifecycle

logger = get_logger("store")


def build_repository(url: str | None = None) -> Optional[ShiftRepository]:
    """
    Engine -> tabelas -> session factory -> repositório.
    Configuração inválida ou banco inacessível: registra o erro e devolve None.
    """
    url = url or resolve_database_url()
    try:
        engine = create_db_engine(url)
        init_db(engine)
    except (SQLAlchemyError, ImportError) as e:
        logger.error("Não foi possível conectar ao banco de dados: %s", e)
        return None
    return ShiftRepository(create_session_factory(engine))


@st.cache_resource
def get_repository() -> Optional[ShiftRepository]:
    setup_logging()
    return build_repository()


def get_lifecycle() -> ShiftLifecycle:
    return ShiftLifecycle(get_repository())
