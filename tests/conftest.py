"""Configuração de fixtures para testes."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database import Base, import_models
from models.category import Category
from models.product import Product
from models.profile import Profile
from models.sale import STATUS_ABERTA, Sale, SaleItem
from services.caixa_service import abrir_caixa


# Banco de dados em memória para testes
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

import_models()


@pytest.fixture(scope="function")
def db_session():
    """Cria uma sessão de banco de dados para testes."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def operador(db_session):
    perfil = Profile(nome="Ana", tipo="colaborador")
    db_session.add(perfil)
    db_session.commit()
    return perfil


@pytest.fixture
def outro_operador(db_session):
    perfil = Profile(nome="Bruno", tipo="colaborador")
    db_session.add(perfil)
    db_session.commit()
    return perfil


@pytest.fixture
def categoria(db_session):
    cat = Category(nome="Cervejas")
    db_session.add(cat)
    db_session.commit()
    return cat


@pytest.fixture
def cerveja(db_session, categoria):
    produto = Product(
        nome="Cerveja Pilsen Lata", categoria_id=categoria.id, custo=2.5, preco_venda=5.0, quantidade=10
    )
    db_session.add(produto)
    db_session.commit()
    return produto


@pytest.fixture
def vodka(db_session):
    produto = Product(nome="Vodka 1L", custo=20.0, preco_venda=35.5, quantidade=3)
    db_session.add(produto)
    db_session.commit()
    return produto


@pytest.fixture
def caixa(db_session, operador):
    """Caixa aberto com 100,00 de troco."""
    return abrir_caixa(db_session, operador.id, 100.0)


@pytest.fixture
def itens_em_comandas_abertas(db_session):
    """Soma das quantidades de um produto em comandas abertas."""

    def _soma(produto_id):
        return db_session.execute(
            select(func.coalesce(func.sum(SaleItem.quantidade), 0))
            .join(Sale, Sale.id == SaleItem.venda_id)
            .where(SaleItem.produto_id == produto_id, Sale.status == STATUS_ABERTA)
        ).scalar()

    return _soma
