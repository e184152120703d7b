"""Testes das versões de tabela usadas para recarregar as páginas."""

import pytest

from models.category import Category
from services import change_feed
from services.caixa_service import abrir_caixa
from services.errors import ValidationError
from services.venda_service import Comanda, abrir_comanda

TABELAS = ("caixas", "movements", "sales", "sale_items", "products", "categories")


@pytest.fixture
def alteradas():
    """Devolve uma função que lista as tabelas cuja versão mudou desde o início do teste."""
    inicial = dict(zip(TABELAS, change_feed.versao(*TABELAS)))

    def _alteradas():
        atual = dict(zip(TABELAS, change_feed.versao(*TABELAS)))
        return {tabela for tabela in TABELAS if atual[tabela] != inicial[tabela]}

    return _alteradas


def test_versao_muda_no_commit(db_session, alteradas):
    db_session.add(Category(nome="Vinhos"))
    db_session.flush()
    assert alteradas() == set()

    db_session.commit()
    assert alteradas() == {"categories"}


def test_versao_incrementa_a_cada_commit(db_session):
    antes = change_feed.versao("categories")
    db_session.add(Category(nome="Vinhos"))
    db_session.commit()
    db_session.add(Category(nome="Destilados"))
    db_session.commit()
    assert change_feed.versao("categories")[0] == antes[0] + 2


def test_rollback_nao_muda_versao(db_session, alteradas):
    db_session.add(Category(nome="Vinhos"))
    db_session.flush()
    db_session.rollback()
    assert alteradas() == set()


def test_operacao_rejeitada_nao_muda_versao(db_session, operador, caixa, alteradas):
    with pytest.raises(ValidationError):
        abrir_caixa(db_session, operador.id, 10)
    assert alteradas() == set()


def test_abertura_de_caixa_altera_caixas_e_movimentos(db_session, operador, alteradas):
    abrir_caixa(db_session, operador.id, 50)
    assert alteradas() == {"caixas", "movements"}


def test_comanda_altera_estoque_itens_e_venda(db_session, operador, caixa, cerveja):
    venda = abrir_comanda(db_session, operador.id, "7")
    antes = change_feed.versao("products", "sale_items", "sales")

    Comanda(db_session, operador.id, venda.id).adicionar(cerveja.id)

    depois = change_feed.versao("products", "sale_items", "sales")
    assert all(d == a + 1 for a, d in zip(antes, depois))
