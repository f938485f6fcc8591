import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from services.aggregation import achievement_percentage, compute_shift_summary, shift_duration
from services.errors import MalformedRecordError, StoreError
from utils.formatters import format_currency, format_date, format_duration, format_time
from utils.navigation import show_sidebar
from utils.store import get_repository
from utils.ui_helpers import page_header


st.set_page_config(page_title="Histórico", page_icon="🗂️", layout="centered")

show_sidebar()
page_header("Histórico de turnos", "🗂️", "Turnos encerrados, do mais recente para o mais antigo.")

repo = get_repository()
if repo is None:
    st.error("Banco de dados indisponível. Verifique a configuração em **Configurações**.")
    st.stop()

try:
    shifts = repo.list_shifts_with_sales(closed_only=True)
    totals = {shift.id: compute_shift_summary(shift.sales).total_sales for shift in shifts}
except (StoreError, MalformedRecordError) as e:
    st.error(f"Erro ao carregar o histórico: {e}")
    st.stop()

if not shifts:
    st.info("Nenhum turno encerrado ainda.")
else:
    for shift in shifts:
        total = totals[shift.id]
        achievement = achievement_percentage(total, shift.target_amount)
        with st.container(border=True):
            col1, col2 = st.columns([2, 1])
            with col1:
                st.markdown(f"**{format_date(shift.start_time.astimezone().date())}**")
                st.caption(
                    f"{format_time(shift.start_time)} – {format_time(shift.end_time)} "
                    f"({format_duration(shift_duration(shift))}) · {len(shift.sales)} corridas"
                )
            with col2:
                st.markdown(f"**{format_currency(total)}**")
                st.caption(f"{achievement}% de {format_currency(shift.target_amount)}")
