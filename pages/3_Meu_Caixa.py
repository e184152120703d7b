import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import SessionLocal
from models.movement import TIPO_ENTRADA, TIPO_SAIDA
from services.caixa_service import (
    caixa_aberto,
    fechar_caixa,
    listar_caixas,
    movimentos_do_caixa,
    registrar_movimento,
    vendas_do_caixa,
)
from services.operador_service import OperatorService
from services.relatorio_service import itens_da_venda
from services.resumo import calcular_resumo
from utils.formatters import format_currency, format_date, format_metodo
from utils.navigation import show_sidebar
from utils.ui_helpers import acao, acompanhar_alteracoes, page_header, warning_box


st.set_page_config(page_title="Meu Caixa", page_icon="💰", layout="wide")

show_sidebar()
operador = OperatorService.exigir_operador()

page_header("Meu Caixa", "💰", "Resumo do turno, movimentos e fechamento do caixa.")
acompanhar_alteracoes("sales", "movements", "caixas", chave="meu_caixa")

db = SessionLocal()

try:
    caixa = caixa_aberto(db, operador["id"])

    if not caixa:
        warning_box(
            "Caixa fechado. Seu turno não foi iniciado: vá para **Caixa Rápido** para abrir o caixa."
        )
    else:
        st.caption(f"Aberto em: {format_date(caixa.data_abertura)}")
        vendas = vendas_do_caixa(db, caixa)
        movimentos = movimentos_do_caixa(db, caixa)
        resumo = calcular_resumo(vendas, movimentos)

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Total de vendas", format_currency(resumo.total_vendas), help=f"{resumo.quantidade_vendas} venda(s)")
        with col2:
            st.metric("Entradas", format_currency(resumo.total_entradas), help="Abertura e suprimentos")
        with col3:
            st.metric("Saídas", format_currency(resumo.total_saidas), help="Sangrias")
        with col4:
            st.metric("Saldo físico (gaveta)", format_currency(resumo.saldo_fisico))

        col5, col6, col7, col8 = st.columns(4)
        with col5:
            st.metric("Dinheiro", format_currency(resumo.dinheiro))
        with col6:
            st.metric("Pix", format_currency(resumo.pix))
        with col7:
            st.metric("Cartão", format_currency(resumo.total_cartao))
        with col8:
            st.metric("Não informado", format_currency(resumo.por_metodo["nao_informado"]))

        st.markdown("---")
        col_vendas, col_mov = st.columns([3, 2])

        with col_vendas:
            st.subheader("Vendas do turno")
            if not vendas:
                st.info("Nenhuma venda finalizada neste turno.")
            for v in vendas:
                titulo = (
                    f"#{v.id} — {format_date(v.updated_at)} — {v.nome_cliente or 'Cliente Balcão'} — "
                    f"{format_metodo(v.metodo_pagamento)} — {format_currency(v.total)}"
                )
                with st.expander(titulo):
                    st.dataframe(
                        [
                            {
                                "Produto": item.produto.nome if item.produto else "-",
                                "Qtd": item.quantidade,
                                "Preço": format_currency(item.preco_unitario),
                                "Subtotal": format_currency(item.subtotal),
                            }
                            for item in itens_da_venda(db, v.id)
                        ],
                        use_container_width=True,
                        hide_index=True,
                    )

        with col_mov:
            st.subheader("Movimentos")
            st.dataframe(
                [
                    {
                        "Hora": format_date(m.created_at),
                        "Tipo": "Entrada" if m.tipo == TIPO_ENTRADA else "Saída",
                        "Descrição": m.descricao or "",
                        "Valor": format_currency(m.valor),
                    }
                    for m in movimentos
                ],
                use_container_width=True,
                hide_index=True,
            )
            with st.form("movimento", clear_on_submit=True):
                tipo = st.radio(
                    "Tipo",
                    options=[TIPO_ENTRADA, TIPO_SAIDA],
                    format_func=lambda t: "Suprimento (entrada)" if t == TIPO_ENTRADA else "Sangria (saída)",
                    horizontal=True,
                )
                valor = st.text_input("Valor", placeholder="Ex: 20,00")
                descricao = st.text_input("Descrição (opcional)")
                registrar = st.form_submit_button("Registrar movimento")
            if registrar:
                with acao("Movimento registrado."):
                    registrar_movimento(db, operador["id"], tipo, valor, descricao)

        st.markdown("---")
        st.subheader("Fechar caixa")
        st.caption("Isso encerra seu turno e registra a saída do valor total movimentado.")
        if st.session_state.get("confirmar_fechamento") is True:
            st.warning(f"Valor final estimado: **{format_currency(resumo.valor_fechamento)}**. Confirmar fechamento?")
            col_ok, col_cancel = st.columns(2)
            with col_ok:
                if st.button("Confirmar fechamento", type="primary", use_container_width=True):
                    st.session_state.pop("confirmar_fechamento", None)
                    with acao("Caixa fechado com sucesso!"):
                        fechar_caixa(db, caixa.id)
            with col_cancel:
                if st.button("Cancelar", use_container_width=True):
                    st.session_state.pop("confirmar_fechamento", None)
                    st.rerun()
        else:
            if st.button("Fechar caixa", type="primary"):
                st.session_state.confirmar_fechamento = True
                st.rerun()

    st.markdown("---")
    with st.expander("📋 Histórico de turnos"):
        caixas = listar_caixas(db, operador["id"])
        if not caixas:
            st.info("Nenhuma sessão de caixa registrada ainda.")
        else:
            st.dataframe(
                [
                    {
                        "ID": c.id,
                        "Abertura": format_date(c.data_abertura),
                        "Fechamento": format_date(c.data_fechamento),
                        "Valor abertura": format_currency(c.valor_abertura),
                        "Valor fechamento": format_currency(c.valor_fechamento) if c.valor_fechamento is not None else "-",
                        "Status": c.status,
                    }
                    for c in caixas
                ],
                use_container_width=True,
                hide_index=True,
            )
finally:
    db.close()
