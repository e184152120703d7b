from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from config.database import Base

STATUS_ABERTA = "aberta"
STATUS_FINALIZADA = "finalizada"

METODOS_PAGAMENTO = {
    "dinheiro": "Dinheiro",
    "pix": "Pix",
    "cartao_credito": "Crédito",
    "cartao_debito": "Débito",
}


class Sale(Base):
    """
    Venda: comanda em aberto ou venda finalizada.
    O total é sempre a soma dos subtotais dos itens.
    """

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    colaborador_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    nome_cliente = Column(String(120), nullable=True)
    numero_comanda = Column(String(30), nullable=True)
    status = Column(String(20), nullable=False, default=STATUS_ABERTA)  # aberta | finalizada
    total = Column(Float, nullable=False, default=0.0)
    metodo_pagamento = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, index=True
    )

    colaborador = relationship("Profile")
    itens = relationship(
        "SaleItem",
        back_populates="venda",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )

    @property
    def finalizada(self) -> bool:
        return self.status == STATUS_FINALIZADA

    def recalcular_total(self) -> float:
        self.total = round(sum(item.subtotal or 0.0 for item in self.itens), 2)
        return self.total


class SaleItem(Base):
    """
    Itens de venda. O preço unitário é copiado do produto no momento em que o item entra.
    """

    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    venda_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    produto_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantidade = Column(Integer, nullable=False, default=1)
    preco_unitario = Column(Float, nullable=False, default=0.0)
    subtotal = Column(Float, nullable=False, default=0.0)

    venda = relationship("Sale", back_populates="itens")
    produto = relationship("Product")

    def definir_quantidade(self, quantidade: int) -> None:
        self.quantidade = quantidade
        self.subtotal = round(quantidade * (self.preco_unitario or 0.0), 2)
