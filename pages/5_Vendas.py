import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import SessionLocal
from models.sale import METODOS_PAGAMENTO
from services.errors import PdvError
from services.operador_service import OperatorService
from services.relatorio_service import (
    PERIODOS,
    periodo,
    produtos_mais_vendidos,
    relatorio_vendas,
    vendas_como_dataframe,
)
from utils.formatters import format_currency, format_date
from utils.navigation import show_sidebar
from utils.ui_helpers import page_header


st.set_page_config(page_title="Vendas", page_icon="🧾", layout="wide")

show_sidebar()
OperatorService.exigir_tipo(["admin"])

page_header("Vendas", "🧾", "Vendas finalizadas por período e totais por forma de pagamento.")

st.subheader("Filtros")
col_tipo, col1, col2 = st.columns(3)
with col_tipo:
    tipo = st.selectbox("Período", options=PERIODOS, index=2)
inicio_padrao, fim_padrao = periodo(tipo)
with col1:
    data_inicio = st.date_input("Data inicial", value=inicio_padrao)
with col2:
    data_fim = st.date_input("Data final", value=fim_padrao)

st.markdown("---")

db = SessionLocal()

try:
    try:
        relatorio = relatorio_vendas(db, data_inicio, data_fim)
    except PdvError as exc:
        st.error(str(exc))
        st.stop()

    col_total, col_qtd, col_ticket = st.columns(3)
    with col_total:
        st.metric("Total geral", format_currency(relatorio.total_geral))
    with col_qtd:
        st.metric("Nº de vendas", relatorio.quantidade)
    with col_ticket:
        st.metric("Ticket médio", format_currency(relatorio.ticket_medio))

    cols = st.columns(len(METODOS_PAGAMENTO) + 1)
    for col, (metodo, rotulo) in zip(cols, [*METODOS_PAGAMENTO.items(), ("nao_informado", "Não informado")]):
        with col:
            st.metric(rotulo, format_currency(relatorio.por_metodo.get(metodo, 0.0)))

    st.markdown("---")
    if not relatorio.vendas:
        st.info("Nenhuma venda finalizada neste período.")
    else:
        df = vendas_como_dataframe(relatorio.vendas)
        df["Data"] = df["Data"].apply(format_date)
        df["Total"] = df["Total"].apply(format_currency)
        st.dataframe(df, use_container_width=True, hide_index=True)

        st.subheader("Produtos mais vendidos")
        df_top = produtos_mais_vendidos(db, data_inicio, data_fim)
        df_top["Valor"] = df_top["Valor"].apply(format_currency)
        st.dataframe(df_top, use_container_width=True, hide_index=True)
finally:
    db.close()
