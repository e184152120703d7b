import sys
from datetime import date, datetime
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import SessionLocal
from services import change_feed
from services.operador_service import OperatorService
from services.relatorio_service import indicadores_dashboard, vendas_como_dataframe
from utils.formatters import format_currency, format_date, format_metodo
from utils.navigation import show_sidebar
from utils.ui_helpers import acompanhar_alteracoes, page_header


st.set_page_config(page_title="Dashboard", page_icon="📊", layout="wide")

show_sidebar()
OperatorService.exigir_tipo(["admin"])

page_header("Dashboard", "📊", "Visão geral da adega, atualizada quando um caixa muda.")
acompanhar_alteracoes("caixas", chave="dashboard")


@st.cache_data(show_spinner="Carregando indicadores...")
def carregar_indicadores(versao: tuple, hoje: date) -> dict:
    """
    Recarrega tudo sempre que a versão das tabelas ou o dia muda.
    """
    db = SessionLocal()
    try:
        dados = indicadores_dashboard(db, hoje)
        dados["vendas_recentes"] = vendas_como_dataframe(dados["vendas_recentes"])
        return dados
    finally:
        db.close()


# horários gravados em UTC
dados = carregar_indicadores(
    change_feed.versao("caixas", "sales", "products"), datetime.utcnow().date()
)

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Vendas hoje", format_currency(dados["vendas_hoje"]), help="Vendas finalizadas hoje")
with col2:
    st.metric("Comandas abertas", dados["comandas_abertas"], help="Em atendimento agora")
with col3:
    if dados["caixas_abertos"] > 0:
        st.metric("Status dos caixas", "🟢 Aberto", help=f"{dados['caixas_abertos']} caixa(s) ativo(s)")
    else:
        st.metric("Status dos caixas", "🔴 Fechado", help="Nenhum caixa aberto")

col4, col5, col6 = st.columns(3)
with col4:
    st.metric("Total de vendas", format_currency(dados["total_vendas"]))
with col5:
    st.metric("Produtos no catálogo", dados["produtos_catalogo"])
with col6:
    st.metric("Estoque total", dados["estoque_total"])

st.markdown("---")
col_pag, col_recentes = st.columns([1, 2])
with col_pag:
    st.subheader("Pagamentos de hoje")
    st.dataframe(
        [
            {"Forma": format_metodo(metodo), "Valor": format_currency(valor)}
            for metodo, valor in dados["pagamentos_hoje"].items()
            if valor
        ],
        use_container_width=True,
        hide_index=True,
    )
with col_recentes:
    st.subheader("Vendas recentes")
    df = dados["vendas_recentes"]
    if df.empty:
        st.info("Nenhuma venda hoje.")
    else:
        df["Data"] = df["Data"].apply(format_date)
        df["Total"] = df["Total"].apply(format_currency)
        st.dataframe(df, use_container_width=True, hide_index=True)
