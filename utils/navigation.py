import streamlit as st


def show_sidebar() -> None:
    """
    Sidebar com links para as páginas do app.
    """
    with st.sidebar:
        st.markdown("## 🚕 Taxi Log")
        st.caption("Registro de turnos e corridas")

        st.markdown("---")
        st.markdown("### Menu")
        st.page_link("app.py", label="Início", icon="🏠")
        st.page_link("pages/1_Historico.py", label="Histórico", icon="🗂️")
        st.page_link("pages/2_Analise.py", label="Análise", icon="📊")
        st.page_link("pages/3_Configuracoes.py", label="Configurações", icon="⚙️")
