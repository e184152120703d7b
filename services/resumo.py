"""
Cálculos do resumo de caixa.

Funções puras sobre as vendas e movimentos já carregados: nenhum saldo é
armazenado, tudo é recalculado a cada carga.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable

from models.movement import TIPO_ENTRADA
from models.sale import METODOS_PAGAMENTO

NAO_INFORMADO = "nao_informado"


def _buckets() -> Dict[str, float]:
    return {**{metodo: 0.0 for metodo in METODOS_PAGAMENTO}, NAO_INFORMADO: 0.0}


def classificar_metodo(metodo) -> str:
    return metodo if metodo in METODOS_PAGAMENTO else NAO_INFORMADO


def somar_por_metodo(vendas: Iterable) -> Dict[str, float]:
    """
    Soma os totais das vendas por forma de pagamento.
    Vendas sem forma de pagamento (ou com uma desconhecida) vão para 'nao_informado'.
    """
    totais = _buckets()
    for venda in vendas:
        totais[classificar_metodo(venda.metodo_pagamento)] += float(venda.total or 0.0)
    return {metodo: round(valor, 2) for metodo, valor in totais.items()}


@dataclass
class ResumoCaixa:
    total_vendas: float = 0.0
    por_metodo: Dict[str, float] = field(default_factory=_buckets)
    total_entradas: float = 0.0
    total_saidas: float = 0.0
    quantidade_vendas: int = 0

    @property
    def dinheiro(self) -> float:
        return self.por_metodo["dinheiro"]

    @property
    def pix(self) -> float:
        return self.por_metodo["pix"]

    @property
    def total_cartao(self) -> float:
        return round(self.por_metodo["cartao_credito"] + self.por_metodo["cartao_debito"], 2)

    @property
    def saldo_fisico(self) -> float:
        """Dinheiro esperado na gaveta: vendas em dinheiro + entradas - saídas."""
        return round(self.dinheiro + self.total_entradas - self.total_saidas, 2)

    @property
    def valor_fechamento(self) -> float:
        """Valor registrado no fechamento: todas as vendas + entradas - saídas."""
        return round(self.total_vendas + self.total_entradas - self.total_saidas, 2)


def calcular_resumo(vendas: Iterable, movimentos: Iterable) -> ResumoCaixa:
    vendas = list(vendas)
    entradas = 0.0
    saidas = 0.0
    for movimento in movimentos:
        if movimento.tipo == TIPO_ENTRADA:
            entradas += float(movimento.valor or 0.0)
        else:
            saidas += float(movimento.valor or 0.0)

    return ResumoCaixa(
        total_vendas=round(sum(float(v.total or 0.0) for v in vendas), 2),
        por_metodo=somar_por_metodo(vendas),
        total_entradas=round(entradas, 2),
        total_saidas=round(saidas, 2),
        quantidade_vendas=len(vendas),
    )
