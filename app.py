import sys
from pathlib import Path

# Garante que o diretório raiz do projeto esteja no path (para rodar de qualquer cwd)
_ROOT = Path(__file__).resolve().parents[0]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.settings import DEFAULT_SHIFT_TARGET
from models.sale import PAYMENT_METHOD_ICONS, PaymentMethod
from utils.formatters import format_currency, format_date, format_time
from utils.keypad import KEYPAD_ROWS, apply_keypad_press
from utils.navigation import show_sidebar
from utils.preferences import load_preferences
from utils.store import get_lifecycle
from utils.ui_helpers import progress_to_target, run_action, status_box


st.set_page_config(
    page_title="Taxi Log",
    page_icon="🚕",
    layout="centered",
    initial_sidebar_state="collapsed",
    menu_items={
        "Get Help": None,
        "Report a bug": None,
        "About": None,
    },
)


def init_session_state() -> None:
    defaults = {
        "keypad_amount": None,
        "keypad_method": PaymentMethod.CASH.value,
        "editing_sale_id": None,
        "confirm_end_shift": False,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def reset_keypad() -> None:
    st.session_state.keypad_amount = None
    st.session_state.keypad_method = PaymentMethod.CASH.value
    st.session_state.editing_sale_id = None


def press_key(key: str) -> None:
    st.session_state.keypad_amount = apply_keypad_press(st.session_state.keypad_amount, key)


def select_method(method_id: int) -> None:
    st.session_state.keypad_method = method_id


def start_editing(sale) -> None:
    st.session_state.editing_sale_id = sale.id
    st.session_state.keypad_amount = sale.amount
    st.session_state.keypad_method = sale.payment_method_id


def monthly_card(dash) -> None:
    st.markdown("#### 📅 Mês atual")
    st.caption(f"Período: {dash.period.label}")
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Vendas no período", format_currency(dash.period_summary.total_sales))
    with col2:
        st.metric("Corridas", dash.period_summary.ride_count)
    progress_to_target(
        dash.period_summary.achievement,
        f"{dash.period_summary.achievement}% da meta mensal {format_currency(dash.monthly_target)}",
    )


def start_shift_form(lifecycle) -> None:
    status_box("Nenhum turno aberto. Informe a meta e inicie o turno.", kind="warning")
    with st.form("iniciar_turno"):
        target = st.number_input(
            "Meta do turno",
            min_value=0,
            value=DEFAULT_SHIFT_TARGET,
            step=1000,
        )
        iniciar = st.form_submit_button("Iniciar turno", type="primary", use_container_width=True)
    if iniciar:
        if run_action(lambda: lifecycle.start(int(target)), "Falha ao iniciar o turno"):
            reset_keypad()
            st.rerun()


def open_shift_panel(lifecycle, dash) -> None:
    shift = dash.current_shift
    summary = dash.shift_summary

    status_box(f"Em serviço desde {format_date(shift.start_time)}")
    st.markdown(f"## {format_currency(summary.total_sales)}")
    progress_to_target(
        dash.shift_achievement,
        f"{dash.shift_achievement}% · meta {format_currency(shift.target_amount)}",
    )

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Corridas", summary.ride_count)
    with col2:
        st.metric("Valor médio", format_currency(summary.avg_fare))

    if summary.breakdown:
        cols = st.columns(len(summary.breakdown))
        for col, item in zip(cols, summary.breakdown):
            with col:
                st.metric(f"{PAYMENT_METHOD_ICONS[item.method]} {item.label}", format_currency(item.amount))

    # Confirmação antes de encerrar: não há como reabrir o turno
    if st.session_state.confirm_end_shift:
        st.warning(f"Encerrar o turno com total de {format_currency(summary.total_sales)}?")
        col_sim, col_nao = st.columns(2)
        with col_sim:
            if st.button("Sim, encerrar turno", type="primary", use_container_width=True):
                st.session_state.confirm_end_shift = False
                if run_action(lambda: lifecycle.end(confirmed=True), "Falha ao encerrar o turno"):
                    reset_keypad()
                    st.rerun()
        with col_nao:
            if st.button("Cancelar", use_container_width=True):
                st.session_state.confirm_end_shift = False
                st.rerun()
    else:
        if st.button("Encerrar turno", use_container_width=True):
            st.session_state.confirm_end_shift = True
            st.rerun()


def sale_entry_panel(lifecycle) -> None:
    editing_id = st.session_state.editing_sale_id
    st.markdown("---")
    st.subheader("Corrigir corrida" if editing_id else "Nova corrida")

    amount = st.session_state.keypad_amount
    st.markdown(f"### {format_currency(amount or 0)}")

    method_cols = st.columns(len(PaymentMethod))
    for col, method in zip(method_cols, PaymentMethod):
        with col:
            st.button(
                f"{PAYMENT_METHOD_ICONS[method]} {method.label}",
                key=f"method_{method.key}",
                type="primary" if st.session_state.keypad_method == method.value else "secondary",
                on_click=select_method,
                args=(method.value,),
                use_container_width=True,
            )

    for row in KEYPAD_ROWS:
        cols = st.columns(3)
        for col, key in zip(cols, row):
            with col:
                st.button(key, key=f"keypad_{key}", on_click=press_key, args=(key,), use_container_width=True)

    col_ok, col_cancel = st.columns(2)
    with col_ok:
        registrar = st.button(
            "Salvar alteração" if editing_id else "Registrar corrida",
            type="primary",
            disabled=not amount,
            use_container_width=True,
        )
    with col_cancel:
        if editing_id and st.button("Cancelar edição", use_container_width=True):
            reset_keypad()
            st.rerun()

    if registrar:
        method = st.session_state.keypad_method
        if editing_id:
            ok = run_action(lambda: lifecycle.edit_sale(editing_id, amount, method), "Erro ao corrigir a corrida")
        else:
            ok = run_action(lambda: lifecycle.add_sale(amount, method), "Erro ao registrar a corrida")
        if ok:
            reset_keypad()
            st.rerun()


def sales_list(lifecycle, dash) -> None:
    st.markdown("---")
    st.subheader("Corridas do turno")
    if not dash.sales:
        st.info("Nenhuma corrida registrada neste turno.")
        return
    for sale in dash.sales:
        method = PaymentMethod(sale.payment_method_id)
        col_info, col_edit, col_del = st.columns([3, 1, 1])
        with col_info:
            st.markdown(
                f"**{format_currency(sale.amount)}** · {PAYMENT_METHOD_ICONS[method]} {method.label} · "
                f"{format_time(sale.created_at)}"
            )
        with col_edit:
            st.button("Editar", key=f"edit_{sale.id}", on_click=start_editing, args=(sale,), use_container_width=True)
        with col_del:
            if st.button("Excluir", key=f"delete_{sale.id}", use_container_width=True):
                if run_action(lambda sale_id=sale.id: lifecycle.delete_sale(sale_id), "Erro ao excluir a corrida"):
                    if st.session_state.editing_sale_id == sale.id:
                        reset_keypad()
                    st.rerun()


def home_page() -> None:
    lifecycle = get_lifecycle()

    col_title, col_refresh = st.columns([4, 1])
    with col_title:
        st.markdown("# 🚕 Taxi Log")
    with col_refresh:
        if st.button("🔄", help="Atualizar dados"):
            st.rerun()

    dash = lifecycle.dashboard(load_preferences())
    if not dash.available:
        st.error("Não foi possível carregar os dados do banco. Verifique a conexão e tente novamente.")

    monthly_card(dash)
    st.markdown("---")

    if dash.current_shift is None:
        if dash.available:
            start_shift_form(lifecycle)
        return

    open_shift_panel(lifecycle, dash)
    sale_entry_panel(lifecycle)
    sales_list(lifecycle, dash)


def main():
    init_session_state()
    show_sidebar()
    home_page()


if __name__ == "__main__":
    main()
