import sys
from pathlib import Path

# Garante que o diretório raiz do projeto esteja no path (para rodar de qualquer cwd)
_ROOT = Path(__file__).resolve().parents[0]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import NOME_LOJA, SessionLocal, init_db
from config.logging_config import setup_logging
from services.operador_service import TIPOS_PERFIL, OperatorService, ensure_default_admin
from utils.formatters import format_date
from utils.navigation import show_sidebar
from utils.ui_helpers import acao


st.set_page_config(
    page_title=f"PDV - {NOME_LOJA}",
    page_icon="🍷",
    layout="wide",
    initial_sidebar_state="expanded",
    menu_items={
        "Get Help": None,
        "Report a bug": None,
        "About": None,
    },
)


@st.cache_resource
def initialize_app():
    """
    Configura logs, cria as tabelas e garante o perfil admin padrão.
    """
    setup_logging()
    init_db()
    ensure_default_admin()


def welcome_page():
    st.markdown(f"# 🍷 PDV - {NOME_LOJA}")
    st.caption("Ponto de venda: comandas, caixa rápido e controle de caixa")
    st.markdown("---")
    st.info("Escolha o operador no menu lateral para começar.")


def home_page():
    from datetime import datetime

    operador = OperatorService.operador_atual()

    st.markdown("# 🏠 Início")
    st.markdown(f"Olá, **{operador['nome']}**! Use o menu ao lado para navegar.")
    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("Hoje", format_date(datetime.now()))
    with col2:
        st.metric("Perfil", operador["tipo"])

    st.markdown("### O que o sistema oferece")
    st.markdown("#### ⚡ Caixa Rápido")
    st.markdown(
        "Abra o caixa com o troco inicial e registre vendas de balcão. "
        "Em dinheiro, informe o valor recebido para calcular o troco."
    )
    st.markdown("#### 🛒 Comandas")
    st.markdown(
        "Abra comandas por número ou nome do cliente. Cada item lançado já baixa o estoque; "
        "ao finalizar, escolha a forma de pagamento. Comandas vazias podem ser canceladas."
    )
    st.markdown("#### 💰 Meu Caixa")
    st.markdown(
        "Resumo do turno: vendas por forma de pagamento, suprimentos, sangrias e saldo em dinheiro na gaveta. "
        "Feche o caixa ao encerrar o turno."
    )

    if operador["tipo"] == "admin":
        st.markdown("---")
        st.subheader("Operadores")
        db = SessionLocal()
        try:
            perfis = OperatorService.listar_perfis(db, apenas_ativos=False)
            st.dataframe(
                [
                    {"ID": p.id, "Nome": p.nome, "Tipo": p.tipo, "Ativo": "Sim" if p.ativo else "Não"}
                    for p in perfis
                ],
                use_container_width=True,
                hide_index=True,
            )
            with st.form("novo_operador"):
                nome = st.text_input("Nome do operador")
                tipo = st.selectbox("Tipo", options=TIPOS_PERFIL, index=1)
                criar = st.form_submit_button("Cadastrar operador", type="primary")
            if criar:
                with acao("Operador cadastrado."):
                    OperatorService.criar_perfil(db, nome, tipo)
        finally:
            db.close()


def main():
    initialize_app()

    show_sidebar()
    if not OperatorService.operador_atual():
        welcome_page()
    else:
        home_page()


if __name__ == "__main__":
    main()
