"""
Relatórios e indicadores: vendas por período, dashboard e detalhes de venda.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Optional

import pandas as pd
from dateutil.relativedelta import relativedelta
from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from models.caixa import STATUS_ABERTO, Caixa
from models.product import Product
from models.sale import METODOS_PAGAMENTO, STATUS_ABERTA, STATUS_FINALIZADA, Sale, SaleItem
from services.errors import NotFoundError, ValidationError
from services.resumo import somar_por_metodo

PERIODOS = ("Diário", "Semanal", "Mensal", "Geral")


def periodo(tipo: str, hoje: Optional[date] = None) -> tuple[date, date]:
    """
    Diário = hoje; Semanal = últimos 7 dias; Mensal = mês atual; Geral = tudo.
    """
    hoje = hoje or date.today()
    if tipo == "Diário":
        return hoje, hoje
    if tipo == "Semanal":
        return hoje - relativedelta(days=6), hoje
    if tipo == "Mensal":
        return hoje + relativedelta(day=1), hoje
    if tipo == "Geral":
        return date(2000, 1, 1), hoje
    raise ValidationError(f"Período desconhecido: {tipo}")


def _limites(inicio: date, fim: date) -> tuple[datetime, datetime]:
    if fim < inicio:
        raise ValidationError("A data final não pode ser anterior à inicial.")
    return datetime.combine(inicio, time.min), datetime.combine(fim, time.max)


@dataclass
class RelatorioVendas:
    vendas: List[Sale] = field(default_factory=list)
    total_geral: float = 0.0
    por_metodo: Dict[str, float] = field(default_factory=dict)

    @property
    def quantidade(self) -> int:
        return len(self.vendas)

    @property
    def ticket_medio(self) -> float:
        return round(self.total_geral / len(self.vendas), 2) if self.vendas else 0.0


def vendas_finalizadas(db: Session, inicio: date, fim: date) -> list[Sale]:
    de, ate = _limites(inicio, fim)
    return db.execute(
        select(Sale)
        .options(joinedload(Sale.colaborador))
        .where(
            Sale.status == STATUS_FINALIZADA,
            Sale.updated_at >= de,
            Sale.updated_at <= ate,
        )
        .order_by(Sale.updated_at.desc())
    ).scalars().all()


def relatorio_vendas(db: Session, inicio: date, fim: date) -> RelatorioVendas:
    vendas = vendas_finalizadas(db, inicio, fim)
    return RelatorioVendas(
        vendas=vendas,
        total_geral=round(sum(v.total or 0.0 for v in vendas), 2),
        por_metodo=somar_por_metodo(vendas),
    )


def indicadores_dashboard(db: Session, hoje: Optional[date] = None) -> dict:
    """
    KPIs do painel do administrador.
    """
    hoje = hoje or date.today()
    vendas_hoje = vendas_finalizadas(db, hoje, hoje)

    total_vendas = db.execute(
        select(func.coalesce(func.sum(Sale.total), 0.0)).where(Sale.status == STATUS_FINALIZADA)
    ).scalar()
    produtos_catalogo, estoque_total = db.execute(
        select(func.count(Product.id), func.coalesce(func.sum(Product.quantidade), 0))
    ).one()
    comandas_abertas = db.execute(
        select(func.count(Sale.id)).where(Sale.status == STATUS_ABERTA)
    ).scalar()
    caixas_abertos = db.execute(
        select(func.count(Caixa.id)).where(Caixa.status == STATUS_ABERTO)
    ).scalar()

    de, ate = _limites(hoje, hoje)
    recentes = db.execute(
        select(Sale)
        .options(joinedload(Sale.colaborador))
        .where(Sale.created_at >= de, Sale.created_at <= ate)
        .order_by(Sale.created_at.desc())
        .limit(10)
    ).scalars().all()

    return {
        "vendas_hoje": round(sum(v.total or 0.0 for v in vendas_hoje), 2),
        "total_vendas": round(float(total_vendas or 0.0), 2),
        "produtos_catalogo": int(produtos_catalogo or 0),
        "estoque_total": int(estoque_total or 0),
        "comandas_abertas": int(comandas_abertas or 0),
        "caixas_abertos": int(caixas_abertos or 0),
        "pagamentos_hoje": somar_por_metodo(vendas_hoje),
        "vendas_recentes": recentes,
    }


def itens_da_venda(db: Session, venda_id: int) -> list[SaleItem]:
    venda = db.get(Sale, venda_id)
    if venda is None:
        raise NotFoundError("Venda não encontrada.")
    return db.execute(
        select(SaleItem)
        .options(joinedload(SaleItem.produto))
        .where(SaleItem.venda_id == venda_id)
        .order_by(SaleItem.id)
    ).scalars().all()


def vendas_como_dataframe(vendas: List[Sale]) -> pd.DataFrame:
    linhas = [
        {
            "ID": v.id,
            "Data": v.updated_at or v.created_at,
            "Cliente": v.nome_cliente or "Cliente Balcão",
            "Comanda": v.numero_comanda or "-",
            "Operador": v.colaborador.nome if v.colaborador else "-",
            "Pagamento": METODOS_PAGAMENTO.get(v.metodo_pagamento, "N/A"),
            "Status": v.status,
            "Total": float(v.total or 0.0),
        }
        for v in vendas
    ]
    colunas = ["ID", "Data", "Cliente", "Comanda", "Operador", "Pagamento", "Status", "Total"]
    return pd.DataFrame(linhas, columns=colunas)


def produtos_mais_vendidos(db: Session, inicio: date, fim: date, limite: int = 10) -> pd.DataFrame:
    de, ate = _limites(inicio, fim)
    linhas = db.execute(
        select(
            Product.nome,
            func.sum(SaleItem.quantidade).label("quantidade"),
            func.sum(SaleItem.subtotal).label("valor"),
        )
        .join(Sale, Sale.id == SaleItem.venda_id)
        .join(Product, Product.id == SaleItem.produto_id)
        .where(
            Sale.status == STATUS_FINALIZADA,
            Sale.updated_at >= de,
            Sale.updated_at <= ate,
        )
        .group_by(Product.nome)
        .order_by(func.sum(SaleItem.quantidade).desc())
        .limit(limite)
    ).all()
    df = pd.DataFrame(
        [(nome, int(qtd or 0), float(valor or 0.0)) for nome, qtd, valor in linhas],
        columns=["Produto", "Quantidade", "Valor"],
    )
    return df
