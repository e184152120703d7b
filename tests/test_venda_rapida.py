"""Testes da venda rápida (carrinho em memória)."""

import pytest
from sqlalchemy import select

from models.sale import STATUS_FINALIZADA, Sale
from services.caixa_service import fechar_caixa
from services.errors import ConflictError, NotFoundError, ValidationError
from services.venda_service import CarrinhoRapido, LinhaCarrinho, calcular_troco


class TestCalcularTroco:
    def test_dinheiro(self):
        assert calcular_troco(35.5, "dinheiro", "50") == pytest.approx(14.5)

    def test_valor_exato(self):
        assert calcular_troco(20, "dinheiro", 20) == 0.0

    def test_valor_insuficiente(self):
        with pytest.raises(ValidationError, match="Valor insuficiente"):
            calcular_troco(35.5, "dinheiro", "30,00")

    def test_dinheiro_sem_valor_recebido(self):
        with pytest.raises(ValidationError):
            calcular_troco(10, "dinheiro")

    def test_outras_formas_nao_tem_troco(self):
        assert calcular_troco(10, "pix", 100) == 0.0
        assert calcular_troco(10, "cartao_credito") == 0.0

    @pytest.mark.parametrize("metodo", [None, "", "cheque"])
    def test_metodo_invalido(self, metodo):
        with pytest.raises(ValidationError):
            calcular_troco(10, metodo, 10)


class TestCarrinhoRapido:
    def test_adicionar_soma_na_mesma_linha(self, db_session, operador, caixa, cerveja):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(cerveja.id)
        carrinho.incrementar(cerveja.id)
        carrinho.adicionar(cerveja.id, 3)

        assert len(carrinho.itens) == 1
        assert carrinho.quantidade_de(cerveja.id) == 5
        assert carrinho.total == pytest.approx(25.0)

    def test_nao_mexe_no_estoque_antes_de_finalizar(self, db_session, operador, caixa, cerveja):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(cerveja.id, 4)
        db_session.refresh(cerveja)
        assert cerveja.quantidade == 10

    def test_estoque_acumulado_no_carrinho(self, db_session, operador, caixa, vodka):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(vodka.id, 2)
        with pytest.raises(ConflictError, match="Estoque insuficiente"):
            carrinho.adicionar(vodka.id, 2)
        assert carrinho.quantidade_de(vodka.id) == 2

    def test_exige_caixa_aberto(self, db_session, operador, cerveja):
        carrinho = CarrinhoRapido(db_session, operador.id)
        with pytest.raises(ConflictError, match="Caixa fechado"):
            carrinho.adicionar(cerveja.id)
        assert carrinho.vazio

    def test_quantidade_invalida(self, db_session, operador, caixa, cerveja):
        carrinho = CarrinhoRapido(db_session, operador.id)
        with pytest.raises(ValidationError):
            carrinho.adicionar(cerveja.id, 0)

    def test_produto_inexistente(self, db_session, operador, caixa):
        with pytest.raises(NotFoundError):
            CarrinhoRapido(db_session, operador.id).adicionar(999)

    def test_decrementar_e_remover(self, db_session, operador, caixa, cerveja, vodka):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(cerveja.id, 2)
        carrinho.adicionar(vodka.id)

        carrinho.decrementar(cerveja.id)
        assert carrinho.quantidade_de(cerveja.id) == 1
        carrinho.decrementar(cerveja.id)
        assert carrinho.quantidade_de(cerveja.id) == 0
        carrinho.remover(vodka.id)
        assert carrinho.vazio

        with pytest.raises(NotFoundError):
            carrinho.remover(vodka.id)

    def test_linhas_sao_compartilhadas(self, db_session, operador, caixa, cerveja):
        """A página guarda a lista no estado da sessão e recria o carrinho a cada execução."""
        linhas = []
        CarrinhoRapido(db_session, operador.id, linhas).adicionar(cerveja.id, 2)
        assert linhas == [LinhaCarrinho(cerveja.id, cerveja.nome, 2, 5.0)]
        assert CarrinhoRapido(db_session, operador.id, linhas).total == pytest.approx(10.0)

    def test_finalizar(self, db_session, operador, caixa, cerveja, vodka):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(cerveja.id, 3)
        carrinho.adicionar(vodka.id, 1)

        resultado = carrinho.finalizar("dinheiro", "100,00")

        assert resultado.total == pytest.approx(50.5)
        assert resultado.troco == pytest.approx(49.5)
        assert carrinho.vazio

        venda = db_session.get(Sale, resultado.venda_id)
        assert venda.status == STATUS_FINALIZADA
        assert venda.metodo_pagamento == "dinheiro"
        assert venda.colaborador_id == operador.id
        assert [(i.produto_id, i.quantidade, i.subtotal) for i in venda.itens] == [
            (cerveja.id, 3, 15.0),
            (vodka.id, 1, 35.5),
        ]
        db_session.refresh(cerveja)
        db_session.refresh(vodka)
        assert cerveja.quantidade == 7
        assert vodka.quantidade == 2

    def test_finalizar_vazio(self, db_session, operador, caixa):
        with pytest.raises(ConflictError, match="Não há itens"):
            CarrinhoRapido(db_session, operador.id).finalizar("pix")

    def test_finalizar_sem_metodo_nao_grava(self, db_session, operador, caixa, cerveja):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(cerveja.id)
        with pytest.raises(ValidationError):
            carrinho.finalizar(None)
        assert not carrinho.vazio
        assert db_session.execute(select(Sale)).scalars().all() == []

    def test_finalizar_com_caixa_fechado(self, db_session, operador, caixa, cerveja):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(cerveja.id)
        fechar_caixa(db_session, caixa.id)
        with pytest.raises(ConflictError, match="Caixa fechado"):
            carrinho.finalizar("pix")

    def test_estoque_vendido_por_outro_desfaz_tudo(self, db_session, operador, caixa, cerveja, vodka):
        carrinho = CarrinhoRapido(db_session, operador.id)
        carrinho.adicionar(cerveja.id, 2)
        carrinho.adicionar(vodka.id, 3)

        # outro terminal levou uma vodka entre a montagem e a finalização
        vodka.quantidade = 2
        db_session.commit()

        with pytest.raises(ConflictError, match="Estoque insuficiente"):
            carrinho.finalizar("pix")

        db_session.refresh(cerveja)
        assert cerveja.quantidade == 10
        assert db_session.execute(select(Sale)).scalars().all() == []
        assert not carrinho.vazio
