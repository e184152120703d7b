from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from config.database import Base


class Category(Base):
    """
    Categoria de produto (cervejas, destilados, vinhos...).
    Somente leitura no PDV: criada pelo seed ou direto no banco.
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(100), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
