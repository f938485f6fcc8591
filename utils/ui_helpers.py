"""
Helpers para deixar as telas mais intuitivas e consistentes.
"""
from typing import Callable

import streamlit as st

from config.settings import get_logger
from services.errors import InvalidSaleError, ShiftStateError, StoreError

logger = get_logger("ui")


def page_header(title: str, icon: str, subtitle: str = ""):
    """Título da página com possível subtítulo."""
    st.markdown(f"# {icon} {title}")
    if subtitle:
        st.caption(subtitle)
    st.markdown("---")


_BOX_STYLES = {
    "success": ("#e8f5e9", "#43a047", "✅"),
    "warning": ("#fff3e0", "#fb8c00", "⚠️"),
}


def status_box(message: str, kind: str = "success"):
    """Faixa de status do turno (aberto = success, fechado = warning)."""
    background, border, icon = _BOX_STYLES[kind]
    st.markdown(
        f"<div style='background-color:{background}; border-left:4px solid {border}; "
        f"padding:14px 18px; margin:12px 0; border-radius:0 8px 8px 0; font-weight:500;'>"
        f"{icon} {message}</div>",
        unsafe_allow_html=True,
    )


def progress_to_target(percentage: int, caption: str):
    """Barra de progresso da meta (0 a 100)."""
    st.progress(max(0, min(100, percentage)) / 100)
    st.caption(caption)


def run_action(action: Callable[[], object], failure_message: str) -> bool:
    """
    Executa uma escrita no banco. Em caso de erro mostra o alerta e
    mantém o estado anterior (a tela só recarrega após sucesso).
    """
    try:
        action()
    except (InvalidSaleError, ShiftStateError) as e:
        st.error(str(e))
        return False
    except StoreError as e:
        logger.error("%s: %s", failure_message, e)
        st.error(f"{failure_message}: {e}")
        return False
    except ValueError as e:
        st.error(str(e))
        return False
    return True
