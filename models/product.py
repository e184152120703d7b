from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from config.database import Base


class Product(Base):
    """
    Produtos do catálogo da adega.
    `quantidade` é o estoque atual e muda a cada item adicionado ou removido de uma venda.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(200), nullable=False, index=True)
    categoria_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    custo = Column(Float, nullable=False, default=0.0)
    preco_venda = Column(Float, nullable=False, default=0.0)
    quantidade = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    categoria = relationship("Category", lazy="joined")

    def __repr__(self):
        return f"<Product(nome='{self.nome}', quantidade={self.quantidade})>"
