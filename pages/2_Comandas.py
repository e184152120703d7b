import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import SessionLocal
from models.sale import METODOS_PAGAMENTO
from services.errors import NotFoundError, PdvError
from services.operador_service import OperatorService
from services.produto_service import listar_produtos
from services.venda_service import (
    Comanda,
    abrir_comanda,
    calcular_troco,
    cancelar_comanda_vazia,
    listar_comandas_abertas,
)
from utils.formatters import format_currency
from utils.navigation import show_sidebar
from utils.ui_helpers import acao, acompanhar_alteracoes, page_header


st.set_page_config(page_title="Comandas", page_icon="🛒", layout="wide")

show_sidebar()
operador = OperatorService.exigir_operador()

page_header(
    "Comandas",
    "🛒",
    "Cada item lançado baixa o estoque na hora. Finalize com a forma de pagamento.",
)
acompanhar_alteracoes("sales", "sale_items", "products", chave="comandas")


def _rotulo(venda) -> str:
    numero = f"Comanda {venda.numero_comanda}" if venda.numero_comanda else f"Comanda #{venda.id}"
    cliente = f" — {venda.nome_cliente}" if venda.nome_cliente else ""
    return f"{numero}{cliente} ({format_currency(venda.total)})"


db = SessionLocal()

try:
    col_lista, col_produtos, col_comanda = st.columns([1, 2, 2])

    with col_lista:
        st.subheader("Comandas abertas")
        with st.expander("➕ Nova comanda"):
            with st.form("nova_comanda", clear_on_submit=True):
                numero = st.text_input("Número da comanda", placeholder="Ex: 12")
                cliente = st.text_input("Nome do cliente (opcional)")
                criar = st.form_submit_button("Abrir comanda", type="primary")
            if criar:
                try:
                    nova = abrir_comanda(db, operador["id"], numero, cliente)
                except PdvError as exc:
                    st.error(str(exc))
                else:
                    st.session_state.comanda_id = nova.id
                    st.toast(f"Comanda {nova.numero_comanda or nova.id} aberta!")
                    st.rerun()

        comandas = listar_comandas_abertas(db)
        if not comandas:
            st.info("Nenhuma comanda aberta.")
        for venda in comandas:
            selecionada = st.session_state.get("comanda_id") == venda.id
            if st.button(
                _rotulo(venda),
                key=f"sel_{venda.id}",
                type="primary" if selecionada else "secondary",
                use_container_width=True,
            ):
                st.session_state.comanda_id = venda.id
                st.rerun()

    comanda = None
    comanda_id = st.session_state.get("comanda_id")
    if comanda_id is not None:
        try:
            comanda = Comanda(db, operador["id"], comanda_id)
        except NotFoundError:
            st.session_state.pop("comanda_id", None)
        else:
            if comanda.venda.finalizada:
                st.session_state.pop("comanda_id", None)
                comanda = None

    with col_produtos:
        st.subheader("Produtos")
        termo = st.text_input("Buscar produto", placeholder="Ex: cerveja, gin...")
        for p in listar_produtos(db, termo):
            c_nome, c_btn = st.columns([3, 1])
            with c_nome:
                st.markdown(f"**{p.nome}** — {format_currency(p.preco_venda)}")
                st.caption(f"Estoque: {p.quantidade}")
            with c_btn:
                if st.button("➕", key=f"add_{p.id}", disabled=comanda is None or p.quantidade <= 0):
                    with acao():
                        comanda.adicionar(p.id)

    with col_comanda:
        if comanda is None:
            st.info("Selecione uma comanda para lançar itens.")
            st.stop()

        st.subheader(_rotulo(comanda.venda))
        if comanda.vazio:
            st.info("Comanda sem itens.")
        for linha in comanda.itens:
            c_nome, c_menos, c_qtd, c_mais, c_sub, c_rem = st.columns([3, 1, 1, 1, 2, 1])
            with c_nome:
                st.text(linha.nome)
            with c_menos:
                if st.button("➖", key=f"menos_{linha.produto_id}"):
                    with acao():
                        comanda.decrementar(linha.produto_id)
            with c_qtd:
                st.text(str(linha.quantidade))
            with c_mais:
                if st.button("➕", key=f"mais_{linha.produto_id}"):
                    with acao():
                        comanda.incrementar(linha.produto_id)
            with c_sub:
                st.text(format_currency(linha.subtotal))
            with c_rem:
                if st.button("🗑️", key=f"rem_{linha.produto_id}"):
                    with acao("Item removido. Estoque devolvido."):
                        comanda.remover(linha.produto_id)

        st.metric("Total", format_currency(comanda.total))
        st.markdown("---")

        if comanda.vazio:
            if st.button("Cancelar comanda vazia", use_container_width=True):
                with acao("Comanda cancelada."):
                    cancelar_comanda_vazia(db, comanda.venda.id)
                    st.session_state.pop("comanda_id", None)
        else:
            metodo = st.selectbox(
                "Forma de pagamento",
                options=list(METODOS_PAGAMENTO),
                format_func=lambda m: METODOS_PAGAMENTO[m],
            )
            valor_recebido = None
            if metodo == "dinheiro":
                valor_recebido = st.text_input("Valor recebido", placeholder="Ex: 50,00")
                if valor_recebido:
                    try:
                        troco = calcular_troco(comanda.total, metodo, valor_recebido)
                        st.markdown(f"**Troco:** {format_currency(troco)}")
                    except PdvError as exc:
                        st.caption(str(exc))

            if st.button("Finalizar venda", type="primary", use_container_width=True):
                try:
                    venda = comanda.finalizar(metodo, valor_recebido)
                except PdvError as exc:
                    st.error(str(exc))
                else:
                    st.session_state.pop("comanda_id", None)
                    st.toast(f"Venda finalizada! {format_currency(venda.total)}")
                    st.rerun()
finally:
    db.close()
