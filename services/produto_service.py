"""
Catálogo de produtos e controle de estoque.
"""
import logging
from typing import Optional

from sqlalchemy import exists, or_, select, update
from sqlalchemy.orm import Session

from config.database import ESTOQUE_BAIXO
from models.category import Category
from models.product import Product
from models.sale import SaleItem
from services.errors import ConflictError, NotFoundError, ValidationError, transacao
from services.valores import ler_quantidade, ler_valor

logger = logging.getLogger(__name__)


def listar_categorias(db: Session) -> list[Category]:
    return db.execute(select(Category).order_by(Category.nome)).scalars().all()


def listar_produtos(
    db: Session, busca: str = "", categoria_id: Optional[int] = None
) -> list[Product]:
    """
    Produtos ordenados por nome, com a categoria carregada.
    `busca` filtra por nome ou nome da categoria (sem diferenciar maiúsculas).
    """
    stmt = select(Product).outerjoin(Category, Product.categoria_id == Category.id)
    termo = (busca or "").strip()
    if termo:
        padrao = f"%{termo}%"
        stmt = stmt.where(or_(Product.nome.ilike(padrao), Category.nome.ilike(padrao)))
    if categoria_id is not None:
        stmt = stmt.where(Product.categoria_id == categoria_id)
    return db.execute(stmt.order_by(Product.nome)).unique().scalars().all()


def obter_produto(db: Session, produto_id: int) -> Product:
    produto = db.get(Product, produto_id)
    if produto is None:
        raise NotFoundError("Produto não encontrado.")
    return produto


def estoque_baixo(produto: Product, limite: int = ESTOQUE_BAIXO) -> bool:
    return (produto.quantidade or 0) < limite


def _validar_dados(db: Session, dados: dict) -> dict:
    nome = (dados.get("nome") or "").strip()
    if not nome:
        raise ValidationError("Preencha o nome do produto.")

    categoria_id = dados.get("categoria_id") or None
    if categoria_id is not None and db.get(Category, categoria_id) is None:
        raise ValidationError("Categoria inválida.")

    return {
        "nome": nome,
        "categoria_id": categoria_id,
        "preco_venda": ler_valor(dados.get("preco_venda"), "Preço de venda"),
        "custo": ler_valor(dados.get("custo", 0), "Custo"),
        "quantidade": ler_quantidade(dados.get("quantidade", 0), "Estoque", minimo=0),
    }


def salvar_produto(db: Session, dados: dict, produto_id: Optional[int] = None) -> Product:
    """
    Cria (sem `produto_id`) ou atualiza um produto.
    """
    valores = _validar_dados(db, dados)
    produto = obter_produto(db, produto_id) if produto_id is not None else Product()

    with transacao(db):
        for campo, valor in valores.items():
            setattr(produto, campo, valor)
        if produto_id is None:
            db.add(produto)

    db.refresh(produto)
    logger.info(
        "Produto %s: %s - %s", "atualizado" if produto_id else "criado", produto.id, produto.nome
    )
    return produto


def excluir_produto(db: Session, produto_id: int) -> None:
    produto = obter_produto(db, produto_id)
    usado = db.execute(
        select(exists().where(SaleItem.produto_id == produto_id))
    ).scalar()
    if usado:
        raise ConflictError(
            f"{produto.nome} já aparece em vendas e não pode ser excluído."
        )
    with transacao(db):
        db.delete(produto)
    logger.info("Produto removido: %s", produto_id)


def baixar_estoque(db: Session, produto_id: int, quantidade: int) -> Product:
    """
    Retira `quantidade` do estoque numa única instrução condicional.
    Não faz commit: roda dentro da transação de quem chama.
    """
    resultado = db.execute(
        update(Product)
        .where(Product.id == produto_id, Product.quantidade >= quantidade)
        .values(quantidade=Product.quantidade - quantidade)
        .execution_options(synchronize_session="fetch")
    )
    produto = obter_produto(db, produto_id)
    if resultado.rowcount == 0:
        db.refresh(produto)
        raise ConflictError(
            f"Estoque insuficiente para {produto.nome} (disponível: {produto.quantidade})."
        )
    return produto


def devolver_estoque(db: Session, produto_id: int, quantidade: int) -> Product:
    """Devolve `quantidade` ao estoque. Não faz commit."""
    resultado = db.execute(
        update(Product)
        .where(Product.id == produto_id)
        .values(quantidade=Product.quantidade + quantidade)
        .execution_options(synchronize_session="fetch")
    )
    if resultado.rowcount == 0:
        raise NotFoundError("Produto não encontrado.")
    return obter_produto(db, produto_id)
