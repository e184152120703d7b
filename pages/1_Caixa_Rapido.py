import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import SessionLocal
from models.sale import METODOS_PAGAMENTO
from services.caixa_service import abrir_caixa, caixa_aberto
from services.errors import PdvError
from services.operador_service import OperatorService
from services.produto_service import listar_categorias, listar_produtos
from services.venda_service import CarrinhoRapido, calcular_troco
from utils.formatters import format_currency, format_date
from utils.navigation import show_sidebar
from utils.ui_helpers import acao, acompanhar_alteracoes, page_header, success_box, warning_box


st.set_page_config(page_title="Caixa Rápido", page_icon="⚡", layout="wide")

show_sidebar()
operador = OperatorService.exigir_operador()

page_header(
    "Caixa Rápido",
    "⚡",
    "Vendas de balcão: adicione produtos ao carrinho e finalize com a forma de pagamento.",
)

acompanhar_alteracoes("products", "caixas", chave="caixa_rapido")

if "carrinho" not in st.session_state:
    st.session_state.carrinho = []

db = SessionLocal()

try:
    caixa = caixa_aberto(db, operador["id"])

    if not caixa:
        warning_box("Seu caixa está fechado. Informe o troco inicial para abrir o turno.")
        with st.form("abrir_caixa"):
            valor_abertura = st.text_input("Valor de abertura (troco inicial)", placeholder="Ex: 100,00")
            abrir = st.form_submit_button("Abrir caixa", type="primary")
        if abrir:
            with acao("Caixa aberto com sucesso."):
                abrir_caixa(db, operador["id"], valor_abertura)
        st.stop()

    success_box(
        f"Caixa aberto desde {format_date(caixa.data_abertura)} — "
        f"Troco inicial: {format_currency(caixa.valor_abertura)}"
    )

    carrinho = CarrinhoRapido(db, operador["id"], st.session_state.carrinho)
    col_prod, col_cart = st.columns([3, 2])

    with col_prod:
        st.subheader("Produtos")
        categorias = listar_categorias(db)
        c_busca, c_cat = st.columns([2, 1])
        with c_busca:
            termo = st.text_input("Buscar produto", placeholder="Ex: cerveja, vodka...")
        with c_cat:
            categoria = st.selectbox(
                "Categoria",
                options=[None] + categorias,
                format_func=lambda c: "Todas" if c is None else c.nome,
            )

        produtos = listar_produtos(db, termo, categoria.id if categoria else None)
        if not produtos:
            st.info("Nenhum produto encontrado para este filtro.")
        cols = st.columns(3)
        for idx, p in enumerate(produtos):
            with cols[idx % 3]:
                st.markdown(f"**{p.nome}**")
                st.caption(
                    f"{p.categoria.nome if p.categoria else 'Sem categoria'} · "
                    f"{format_currency(p.preco_venda)} · Estoque: {p.quantidade}"
                )
                if st.button("Adicionar", key=f"add_{p.id}", disabled=p.quantidade <= 0, use_container_width=True):
                    with acao():
                        carrinho.adicionar(p.id)

    with col_cart:
        st.subheader("Carrinho")
        if carrinho.vazio:
            st.info("Nenhum item no carrinho.")
        else:
            for linha in carrinho.itens:
                c_nome, c_menos, c_qtd, c_mais, c_sub = st.columns([3, 1, 1, 1, 2])
                with c_nome:
                    st.text(linha.nome)
                with c_menos:
                    if st.button("➖", key=f"menos_{linha.produto_id}"):
                        with acao():
                            carrinho.decrementar(linha.produto_id)
                with c_qtd:
                    st.text(str(linha.quantidade))
                with c_mais:
                    if st.button("➕", key=f"mais_{linha.produto_id}"):
                        with acao():
                            carrinho.incrementar(linha.produto_id)
                with c_sub:
                    st.text(format_currency(linha.subtotal))

            st.metric("Total", format_currency(carrinho.total))
            if st.button("Limpar carrinho", use_container_width=True):
                carrinho.limpar()
                st.rerun()

            st.markdown("---")
            st.subheader("Pagamento")
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
                        troco = calcular_troco(carrinho.total, metodo, valor_recebido)
                        st.markdown(f"**Troco:** {format_currency(troco)}")
                    except PdvError as exc:
                        st.caption(str(exc))

            if st.button("Finalizar venda", type="primary", use_container_width=True):
                try:
                    venda = carrinho.finalizar(metodo, valor_recebido)
                except PdvError as exc:
                    st.error(str(exc))
                else:
                    mensagem = f"Venda #{venda.venda_id} realizada: {format_currency(venda.total)}"
                    if venda.troco:
                        mensagem += f" — troco {format_currency(venda.troco)}"
                    st.toast(mensagem)
                    st.rerun()
finally:
    db.close()
