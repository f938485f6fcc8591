import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import describe_database, resolve_database_url
from services.aggregation import calculate_monthly_period
from utils.formatters import format_currency
from utils.navigation import show_sidebar
from utils.preferences import CLOSING_DAY_KEY, MONTHLY_TARGET_KEY, load_preferences, save_preferences
from utils.store import get_lifecycle
from utils.ui_helpers import page_header


st.set_page_config(page_title="Configurações", page_icon="⚙️", layout="centered")

show_sidebar()
page_header("Configurações", "⚙️", "Meta mensal, dia de fechamento e conexão com o banco.")

prefs = load_preferences()

st.subheader("Meta mensal")
with st.form("preferencias"):
    closing_day = st.number_input(
        "Dia de fechamento (1 a 31)",
        min_value=1,
        max_value=31,
        value=prefs[CLOSING_DAY_KEY],
        step=1,
    )
    monthly_target = st.number_input(
        "Meta mensal",
        min_value=0,
        value=prefs[MONTHLY_TARGET_KEY],
        step=10000,
    )
    salvar = st.form_submit_button("Salvar", type="primary")

if salvar:
    try:
        prefs = save_preferences(int(closing_day), int(monthly_target))
    except (OSError, ValueError) as e:
        st.error(f"Não foi possível salvar: {e}")
    else:
        st.success("Configurações salvas.")

period = calculate_monthly_period(prefs[CLOSING_DAY_KEY], get_lifecycle().now())
st.caption(f"Período atual: {period.label} · Meta {format_currency(prefs[MONTHLY_TARGET_KEY])}")

st.markdown("---")
st.subheader("Banco de dados")
info = describe_database(resolve_database_url())
if not info["valid"]:
    st.error("DATABASE_URL inválida: não foi possível interpretar a string de conexão. Veja o log para detalhes.")
if not info["configured"]:
    st.warning("DATABASE_URL não definido: usando o banco SQLite local (modo desenvolvimento).")
st.markdown(f"**Tipo:** {info['dialect']}  \n**Host:** {info['host']}  \n**Banco:** {info['database']}")
st.code(info["url"], language=None)
if get_lifecycle().repository is None:
    st.error("Não foi possível conectar ao banco com esta configuração. Veja o log para detalhes.")
else:
    st.success("Conexão com o banco inicializada.")
