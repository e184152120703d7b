import streamlit as st

from config.database import NOME_LOJA, SessionLocal
from config.logging_config import setup_logging
from services.operador_service import OperatorService


def show_sidebar() -> None:
    """
    Sidebar com o operador atual e os links das páginas do PDV.
    Admin vê o painel; colaborador vê as telas de venda.
    """
    setup_logging()
    operador = OperatorService.operador_atual()
    tipo = operador["tipo"] if operador else None

    with st.sidebar:
        st.markdown(f"## 🍷 {NOME_LOJA}")
        if operador:
            st.markdown(f"**{operador['nome']}**")
            st.caption("Painel Admin" if tipo == "admin" else "Área do Colaborador")

        st.markdown("---")
        st.markdown("### Menu")
        st.page_link("app.py", label="Início", icon="🏠")
        if tipo == "admin":
            st.page_link("pages/6_Dashboard.py", label="Dashboard", icon="📊")
            st.page_link("pages/4_Produtos.py", label="Produtos", icon="📦")
            st.page_link("pages/5_Vendas.py", label="Vendas", icon="🧾")
        if operador:
            st.page_link("pages/1_Caixa_Rapido.py", label="Caixa Rápido", icon="⚡")
            st.page_link("pages/2_Comandas.py", label="Comandas", icon="🛒")
            st.page_link("pages/3_Meu_Caixa.py", label="Meu Caixa", icon="💰")

        st.markdown("---")
        if operador:
            if st.button("Trocar operador", use_container_width=True):
                OperatorService.sair()
                if hasattr(st, "switch_page"):
                    st.switch_page("app.py")
                else:
                    st.rerun()
        else:
            _escolher_operador()


def _escolher_operador() -> None:
    db = SessionLocal()
    try:
        perfis = OperatorService.listar_perfis(db)
    finally:
        db.close()
    if not perfis:
        st.info("Nenhum operador cadastrado.")
        return
    perfil = st.selectbox(
        "Operador",
        options=perfis,
        format_func=lambda p: f"{p.nome} ({p.tipo})",
    )
    if st.button("Entrar", type="primary", use_container_width=True):
        OperatorService.selecionar(perfil)
        st.rerun()
