"""
Seed de categorias, produtos e operadores fictícios para testes do PDV.
Pode ser executado mais de uma vez: atualiza os produtos pelo nome.
"""
import logging
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from sqlalchemy import select

from config.database import SessionLocal, init_db
from config.logging_config import setup_logging
from models.category import Category
from models.product import Product
from models.profile import Profile
from services.operador_service import OperatorService, ensure_default_admin

logger = logging.getLogger(__name__)

CATEGORIAS = ["Cervejas", "Destilados", "Vinhos", "Refrigerantes", "Gelo e Carvão"]

PRODUTOS = [
    dict(nome="Cerveja Pilsen Lata 350ml", categoria="Cervejas", custo=2.9, preco_venda=5.0, quantidade=240),
    dict(nome="Cerveja IPA Long Neck 355ml", categoria="Cervejas", custo=6.5, preco_venda=11.9, quantidade=72),
    dict(nome="Vodka Nacional 1L", categoria="Destilados", custo=22.0, preco_venda=39.9, quantidade=18),
    dict(nome="Gin London Dry 750ml", categoria="Destilados", custo=58.0, preco_venda=99.9, quantidade=9),
    dict(nome="Cachaça Envelhecida 700ml", categoria="Destilados", custo=31.0, preco_venda=59.9, quantidade=12),
    dict(nome="Vinho Tinto Cabernet 750ml", categoria="Vinhos", custo=28.0, preco_venda=54.9, quantidade=24),
    dict(nome="Vinho Branco Chardonnay 750ml", categoria="Vinhos", custo=30.0, preco_venda=57.9, quantidade=6),
    dict(nome="Refrigerante Cola 2L", categoria="Refrigerantes", custo=6.0, preco_venda=11.0, quantidade=48),
    dict(nome="Água Tônica Lata 350ml", categoria="Refrigerantes", custo=2.5, preco_venda=5.5, quantidade=60),
    dict(nome="Gelo em Cubos 5kg", categoria="Gelo e Carvão", custo=7.0, preco_venda=15.0, quantidade=30),
    dict(nome="Carvão Vegetal 4kg", categoria="Gelo e Carvão", custo=12.0, preco_venda=24.9, quantidade=15),
]

OPERADORES = ["Colaborador Balcão"]


def main() -> None:
    setup_logging()
    init_db()
    ensure_default_admin()
    db = SessionLocal()
    try:
        categorias = {}
        for nome in CATEGORIAS:
            cat = db.execute(select(Category).where(Category.nome == nome)).scalar_one_or_none()
            if not cat:
                cat = Category(nome=nome)
                db.add(cat)
                db.flush()
            categorias[nome] = cat

        created, updated = 0, 0
        for data in PRODUTOS:
            data = dict(data)
            categoria = categorias[data.pop("categoria")]
            prod = db.execute(select(Product).where(Product.nome == data["nome"])).scalar_one_or_none()
            if prod:
                updated += 1
            else:
                prod = Product()
                db.add(prod)
                created += 1
            for campo, valor in data.items():
                setattr(prod, campo, valor)
            prod.categoria_id = categoria.id

        db.commit()
        logger.info("Produtos criados: %s, atualizados: %s", created, updated)

        for nome in OPERADORES:
            existe = db.execute(select(Profile).where(Profile.nome == nome)).first()
            if not existe:
                OperatorService.criar_perfil(db, nome, "colaborador")
    finally:
        db.close()


if __name__ == "__main__":
    main()
