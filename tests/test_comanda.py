"""Testes das comandas (vendas abertas gravadas a cada ação)."""

import pytest
from sqlalchemy import select

from models.sale import STATUS_ABERTA, STATUS_FINALIZADA, Sale, SaleItem
from services.caixa_service import abrir_caixa, carregar_resumo
from services.errors import ConflictError, NotFoundError, ValidationError
from services.produto_service import salvar_produto
from services.venda_service import (
    Comanda,
    abrir_comanda,
    cancelar_comanda_vazia,
    listar_comandas_abertas,
)


@pytest.fixture
def comanda(db_session, operador, caixa):
    venda = abrir_comanda(db_session, operador.id, numero_comanda=" 12 ", nome_cliente="Carlos")
    return Comanda(db_session, operador.id, venda.id)


def _estoque(db_session, produto):
    db_session.refresh(produto)
    return produto.quantidade


class TestAbrirComanda:
    def test_abre_comanda_vazia(self, db_session, operador, comanda):
        venda = comanda.venda
        assert venda.status == STATUS_ABERTA
        assert venda.numero_comanda == "12"
        assert venda.nome_cliente == "Carlos"
        assert venda.total == 0.0
        assert comanda.vazio

    def test_campos_opcionais(self, db_session, operador):
        venda = abrir_comanda(db_session, operador.id, "  ", None)
        assert venda.numero_comanda is None
        assert venda.nome_cliente is None

    def test_listar_abertas(self, db_session, operador, comanda, cerveja):
        outra = abrir_comanda(db_session, operador.id, "13")
        comanda.adicionar(cerveja.id)
        comanda.finalizar("pix")
        assert [v.id for v in listar_comandas_abertas(db_session)] == [outra.id]

    def test_comanda_inexistente(self, db_session, operador):
        with pytest.raises(NotFoundError):
            Comanda(db_session, operador.id, 999)


class TestItensDaComanda:
    def test_adicionar_baixa_estoque_na_hora(self, db_session, comanda, cerveja, itens_em_comandas_abertas):
        comanda.adicionar(cerveja.id, 3)

        assert _estoque(db_session, cerveja) == 7
        assert itens_em_comandas_abertas(cerveja.id) == 3
        assert comanda.total == pytest.approx(15.0)
        assert db_session.get(Sale, comanda.venda.id).total == pytest.approx(15.0)

    def test_mesmo_produto_soma_no_item(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id)
        comanda.incrementar(cerveja.id)
        itens = db_session.execute(select(SaleItem)).scalars().all()
        assert len(itens) == 1
        assert itens[0].quantidade == 2
        assert itens[0].subtotal == pytest.approx(10.0)

    def test_estoque_se_conserva(self, db_session, comanda, cerveja, vodka, itens_em_comandas_abertas):
        comanda.adicionar(cerveja.id, 4)
        comanda.adicionar(vodka.id, 2)
        comanda.decrementar(cerveja.id)
        comanda.remover(vodka.id)

        for produto, inicial in ((cerveja, 10), (vodka, 3)):
            assert _estoque(db_session, produto) + itens_em_comandas_abertas(produto.id) == inicial
        assert comanda.total == pytest.approx(15.0)

    def test_remover_ultimo_apaga_item(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id)
        comanda.decrementar(cerveja.id)
        assert comanda.vazio
        assert comanda.total == 0.0
        assert db_session.execute(select(SaleItem)).scalars().all() == []
        assert _estoque(db_session, cerveja) == 10

    def test_decrementar_item_ausente(self, db_session, comanda, cerveja):
        with pytest.raises(NotFoundError):
            comanda.decrementar(cerveja.id)

    def test_estoque_insuficiente_nao_altera_nada(self, db_session, comanda, vodka):
        comanda.adicionar(vodka.id, 2)
        with pytest.raises(ConflictError, match="disponível: 1"):
            comanda.adicionar(vodka.id, 2)

        assert _estoque(db_session, vodka) == 1
        assert comanda.quantidade_de(vodka.id) == 2
        assert comanda.total == pytest.approx(71.0)

    def test_preco_do_momento_da_inclusao(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id, 2)
        salvar_produto(
            db_session,
            {"nome": cerveja.nome, "categoria_id": cerveja.categoria_id, "preco_venda": 6, "quantidade": 8},
            cerveja.id,
        )
        comanda.adicionar(cerveja.id)

        item = comanda.venda.itens[0]
        assert item.preco_unitario == 5.0
        assert item.quantidade == 3
        assert item.subtotal == pytest.approx(15.0)

    def test_total_e_soma_dos_subtotais(self, db_session, comanda, cerveja, vodka):
        comanda.adicionar(cerveja.id, 3)
        comanda.adicionar(vodka.id)
        comanda.decrementar(cerveja.id)
        soma = sum(i.subtotal for i in comanda.venda.itens)
        assert comanda.total == pytest.approx(soma)
        assert comanda.total == pytest.approx(45.5)


class TestFinalizarComanda:
    def test_finalizar(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id, 2)
        resultado = comanda.finalizar("dinheiro", 20)

        assert resultado.troco == pytest.approx(10.0)
        venda = db_session.get(Sale, comanda.venda.id)
        assert venda.status == STATUS_FINALIZADA
        assert venda.metodo_pagamento == "dinheiro"
        # estoque já tinha sido baixado ao adicionar
        assert _estoque(db_session, cerveja) == 8

    def test_finalizar_vazia(self, db_session, comanda):
        with pytest.raises(ConflictError, match="Não há itens"):
            comanda.finalizar("pix")
        assert comanda.venda.status == STATUS_ABERTA

    def test_dinheiro_insuficiente(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id, 2)
        with pytest.raises(ValidationError, match="Valor insuficiente"):
            comanda.finalizar("dinheiro", 5)
        assert comanda.venda.status == STATUS_ABERTA

    def test_finalizada_nao_muda_mais(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id)
        comanda.finalizar("cartao_credito")

        with pytest.raises(ConflictError, match="já foi finalizada"):
            comanda.adicionar(cerveja.id)
        with pytest.raises(ConflictError):
            comanda.decrementar(cerveja.id)
        with pytest.raises(ConflictError):
            comanda.finalizar("pix")
        assert _estoque(db_session, cerveja) == 9
        assert comanda.total == pytest.approx(5.0)

    def test_valor_vai_para_o_caixa_de_quem_finaliza(self, db_session, operador, outro_operador, caixa, cerveja):
        venda = abrir_comanda(db_session, operador.id, "7")
        Comanda(db_session, operador.id, venda.id).adicionar(cerveja.id, 2)
        abrir_caixa(db_session, outro_operador.id, 50)

        resultado = Comanda(db_session, outro_operador.id, venda.id).finalizar("dinheiro", 20)

        assert resultado.troco == pytest.approx(10.0)
        assert db_session.get(Sale, venda.id).colaborador_id == outro_operador.id
        resumo = carregar_resumo(db_session, outro_operador.id)
        assert resumo.total_vendas == pytest.approx(10.0)
        assert resumo.saldo_fisico == pytest.approx(60.0)
        assert carregar_resumo(db_session, operador.id).total_vendas == 0.0

    def test_finalizada_em_outro_terminal(self, db_session, operador, comanda, cerveja):
        comanda.adicionar(cerveja.id)
        outro_terminal = Comanda(db_session, operador.id, comanda.venda.id)
        outro_terminal.finalizar("pix")

        with pytest.raises(ConflictError):
            comanda.finalizar("pix")


class TestCancelarComanda:
    def test_cancela_vazia(self, db_session, comanda):
        venda_id = comanda.venda.id
        cancelar_comanda_vazia(db_session, venda_id)
        assert db_session.get(Sale, venda_id) is None

    def test_nao_cancela_com_itens(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id)
        with pytest.raises(ConflictError):
            cancelar_comanda_vazia(db_session, comanda.venda.id)

    def test_nao_cancela_finalizada(self, db_session, comanda, cerveja):
        comanda.adicionar(cerveja.id)
        comanda.finalizar("pix")
        with pytest.raises(ConflictError):
            cancelar_comanda_vazia(db_session, comanda.venda.id)

    def test_inexistente(self, db_session):
        with pytest.raises(NotFoundError):
            cancelar_comanda_vazia(db_session, 404)
