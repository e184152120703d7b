"""Testes dos relatórios e do dashboard."""

from datetime import date, datetime, timedelta

import pytest

from services.errors import NotFoundError, ValidationError
from services.relatorio_service import (
    indicadores_dashboard,
    itens_da_venda,
    periodo,
    produtos_mais_vendidos,
    relatorio_vendas,
    vendas_como_dataframe,
)
from services.venda_service import CarrinhoRapido, Comanda, abrir_comanda


def _hoje():
    # os horários são gravados em UTC
    return datetime.utcnow().date()


@pytest.fixture
def vendas(db_session, operador, caixa, cerveja, vodka):
    rapida = CarrinhoRapido(db_session, operador.id)
    rapida.adicionar(cerveja.id, 2)
    rapida.finalizar("pix")

    rapida.adicionar(vodka.id)
    rapida.adicionar(cerveja.id)
    rapida.finalizar("dinheiro", 50)

    aberta = abrir_comanda(db_session, operador.id, "3", "Maria")
    Comanda(db_session, operador.id, aberta.id).adicionar(cerveja.id, 4)
    return aberta


class TestPeriodo:
    hoje = date(2024, 3, 20)

    def test_diario(self):
        assert periodo("Diário", self.hoje) == (self.hoje, self.hoje)

    def test_semanal(self):
        assert periodo("Semanal", self.hoje) == (date(2024, 3, 14), self.hoje)

    def test_mensal(self):
        assert periodo("Mensal", self.hoje) == (date(2024, 3, 1), self.hoje)

    def test_geral(self):
        assert periodo("Geral", self.hoje)[0] == date(2000, 1, 1)

    def test_desconhecido(self):
        with pytest.raises(ValidationError):
            periodo("Anual", self.hoje)


class TestRelatorioVendas:
    def test_so_vendas_finalizadas(self, db_session, vendas):
        hoje = _hoje()
        relatorio = relatorio_vendas(db_session, hoje - timedelta(days=1), hoje + timedelta(days=1))

        assert relatorio.quantidade == 2
        assert relatorio.total_geral == pytest.approx(50.5)
        assert relatorio.ticket_medio == pytest.approx(25.25)
        assert relatorio.por_metodo["pix"] == pytest.approx(10.0)
        assert relatorio.por_metodo["dinheiro"] == pytest.approx(40.5)

    def test_periodo_sem_vendas(self, db_session, vendas):
        relatorio = relatorio_vendas(db_session, date(2000, 1, 1), date(2000, 1, 31))
        assert relatorio.quantidade == 0
        assert relatorio.ticket_medio == 0.0

    def test_datas_invertidas(self, db_session):
        with pytest.raises(ValidationError):
            relatorio_vendas(db_session, date(2024, 2, 1), date(2024, 1, 1))

    def test_dataframe(self, db_session, vendas):
        hoje = _hoje()
        df = vendas_como_dataframe(relatorio_vendas(db_session, hoje, hoje + timedelta(days=1)).vendas)
        assert list(df.columns) == ["ID", "Data", "Cliente", "Comanda", "Operador", "Pagamento", "Status", "Total"]
        assert set(df["Pagamento"]) == {"Pix", "Dinheiro"}
        assert set(df["Cliente"]) == {"Cliente Balcão"}
        assert df["Total"].sum() == pytest.approx(50.5)

    def test_dataframe_vazio(self):
        assert vendas_como_dataframe([]).empty

    def test_mais_vendidos(self, db_session, vendas):
        hoje = _hoje()
        df = produtos_mais_vendidos(db_session, hoje, hoje + timedelta(days=1))
        assert df.iloc[0]["Produto"] == "Cerveja Pilsen Lata"
        assert df.iloc[0]["Quantidade"] == 3
        assert df.iloc[0]["Valor"] == pytest.approx(15.0)
        assert len(df) == 2


class TestDashboard:
    def test_indicadores(self, db_session, vendas):
        indicadores = indicadores_dashboard(db_session, _hoje())

        assert indicadores["vendas_hoje"] == pytest.approx(50.5)
        assert indicadores["total_vendas"] == pytest.approx(50.5)
        assert indicadores["produtos_catalogo"] == 2
        assert indicadores["estoque_total"] == (10 - 3 - 4) + (3 - 1)
        assert indicadores["comandas_abertas"] == 1
        assert indicadores["caixas_abertos"] == 1
        assert indicadores["pagamentos_hoje"]["pix"] == pytest.approx(10.0)
        assert len(indicadores["vendas_recentes"]) == 3

    def test_vendas_hoje_depende_do_dia_informado(self, db_session, vendas):
        amanha = indicadores_dashboard(db_session, _hoje() + timedelta(days=1))
        assert amanha["vendas_hoje"] == 0.0
        assert amanha["vendas_recentes"] == []
        assert amanha["total_vendas"] == pytest.approx(50.5)

    def test_banco_vazio(self, db_session):
        indicadores = indicadores_dashboard(db_session, _hoje())
        assert indicadores["vendas_hoje"] == 0.0
        assert indicadores["estoque_total"] == 0
        assert indicadores["vendas_recentes"] == []


class TestItensDaVenda:
    def test_itens(self, db_session, vendas, cerveja):
        itens = itens_da_venda(db_session, vendas.id)
        assert [(i.produto.nome, i.quantidade) for i in itens] == [(cerveja.nome, 4)]

    def test_venda_inexistente(self, db_session):
        with pytest.raises(NotFoundError):
            itens_da_venda(db_session, 123)
