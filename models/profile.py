from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from config.database import Base


class Profile(Base):
    """
    Perfis de operadores da adega.
    Tipos suportados:
    - admin
    - colaborador
    """

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(100), nullable=False)
    tipo = Column(String(20), nullable=False, default="colaborador")
    ativo = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
