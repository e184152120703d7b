import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

from config.database import ESTOQUE_BAIXO, SessionLocal
from services.operador_service import OperatorService
from services.produto_service import (
    estoque_baixo,
    excluir_produto,
    listar_categorias,
    listar_produtos,
    obter_produto,
    salvar_produto,
)
from utils.formatters import format_currency
from utils.navigation import show_sidebar
from utils.ui_helpers import acao, page_header


st.set_page_config(page_title="Produtos", page_icon="📦", layout="wide")

show_sidebar()
OperatorService.exigir_tipo(["admin"])

page_header("Produtos", "📦", "Gerencie o catálogo e o estoque.")

db = SessionLocal()

try:
    categorias = listar_categorias(db)

    st.subheader("Lista de produtos")
    termo = st.text_input("Buscar", placeholder="Nome ou categoria")
    produtos = listar_produtos(db, termo)
    if not produtos:
        st.info("Nenhum produto cadastrado.")
    else:
        st.dataframe(
            [
                {
                    "ID": p.id,
                    "Nome": p.nome,
                    "Categoria": p.categoria.nome if p.categoria else "-",
                    "Custo": format_currency(p.custo),
                    "Preço": format_currency(p.preco_venda),
                    "Estoque": p.quantidade,
                    "Alerta": f"⚠️ abaixo de {ESTOQUE_BAIXO}" if estoque_baixo(p) else "",
                }
                for p in produtos
            ],
            use_container_width=True,
            hide_index=True,
        )

    st.markdown("---")
    st.subheader("Cadastrar ou editar")
    opcoes = [None] + [p.id for p in listar_produtos(db)]
    produto_id = st.selectbox(
        "Produto",
        options=opcoes,
        format_func=lambda pid: "➕ Novo produto" if pid is None else obter_produto(db, pid).nome,
    )
    produto_atual = obter_produto(db, produto_id) if produto_id is not None else None

    nomes_categoria = ["(Sem categoria)"] + [c.nome for c in categorias]
    indice_categoria = 0
    if produto_atual and produto_atual.categoria:
        indice_categoria = nomes_categoria.index(produto_atual.categoria.nome)

    with st.form(f"produto_{produto_id or 'novo'}"):
        nome = st.text_input("Nome", value=produto_atual.nome if produto_atual else "")
        categoria_nome = st.selectbox("Categoria", options=nomes_categoria, index=indice_categoria)
        col1, col2, col3 = st.columns(3)
        with col1:
            preco_venda = st.number_input(
                "Preço de venda",
                min_value=0.0,
                step=0.5,
                value=float(produto_atual.preco_venda) if produto_atual else 0.0,
            )
        with col2:
            custo = st.number_input(
                "Custo",
                min_value=0.0,
                step=0.5,
                value=float(produto_atual.custo) if produto_atual else 0.0,
            )
        with col3:
            quantidade = st.number_input(
                "Estoque atual",
                min_value=0,
                step=1,
                value=int(produto_atual.quantidade) if produto_atual else 0,
            )
        salvar = st.form_submit_button("Salvar", type="primary")

    if salvar:
        categoria = next((c for c in categorias if c.nome == categoria_nome), None)
        dados = {
            "nome": nome,
            "categoria_id": categoria.id if categoria else None,
            "preco_venda": preco_venda,
            "custo": custo,
            "quantidade": quantidade,
        }
        with acao("Produto atualizado!" if produto_atual else "Produto adicionado!"):
            salvar_produto(db, dados, produto_id)

    if produto_atual:
        if st.button("Excluir produto", type="secondary"):
            with acao("Produto excluído!"):
                excluir_produto(db, produto_atual.id)
finally:
    db.close()
