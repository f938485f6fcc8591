import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import pandas as pd
import streamlit as st

from services.aggregation import payment_breakdown, recent_shift_series, summarize_by_day
from services.errors import StoreError
from utils.formatters import format_currency, format_time
from utils.navigation import show_sidebar
from utils.store import get_repository
from utils.ui_helpers import page_header


st.set_page_config(page_title="Análise", page_icon="📊", layout="centered")

show_sidebar()
page_header("Análise de vendas", "📊", "Resumo por dia, últimos turnos e formas de pagamento.")

repo = get_repository()
if repo is None:
    st.error("Banco de dados indisponível. Verifique a configuração em **Configurações**.")
    st.stop()

try:
    shifts = repo.list_shifts_with_sales(closed_only=True)
except StoreError as e:
    st.error(f"Erro ao carregar os turnos: {e}")
    st.stop()

if not shifts:
    st.info("Nenhum turno encerrado para analisar.")
    st.stop()

st.subheader("Resumo por dia")
linhas = []
for day in summarize_by_day(shifts):
    linhas.append(
        {
            "Data": day.date,
            "Dia": day.day_of_week,
            "Início": format_time(day.start_time),
            "Fim": format_time(day.end_time),
            "Corridas": day.ride_count,
            "Vendas": format_currency(day.total_sales),
            "Turnos": day.shift_count,
        }
    )
st.dataframe(linhas, use_container_width=True, hide_index=True)

st.markdown("---")
st.subheader("Últimos 7 turnos: vendas x meta")
series = recent_shift_series(shifts, limit=7)
if series:
    df = pd.DataFrame(series).rename(
        columns={"label": "Turno", "total_sales": "Vendas", "target_amount": "Meta"}
    )
    st.bar_chart(df, x="Turno", y=["Vendas", "Meta"], stack=False)

st.markdown("---")
st.subheader("Formas de pagamento")
breakdown = payment_breakdown(shifts)
if not breakdown:
    st.info("Nenhuma corrida registrada.")
else:
    df_pag = pd.DataFrame(
        [{"Forma": item.label, "Valor": item.amount} for item in breakdown]
    )
    st.bar_chart(df_pag, x="Forma", y="Valor")
    total = sum(item.amount for item in breakdown)
    for item in breakdown:
        st.markdown(f"- **{item.label}**: {format_currency(item.amount)} ({item.amount / total * 100:.1f}%)")
