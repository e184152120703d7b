from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String

from config.database import Base

TIPO_ENTRADA = "entrada"
TIPO_SAIDA = "saida"
TIPOS_MOVIMENTO = (TIPO_ENTRADA, TIPO_SAIDA)


class Movement(Base):
    """
    Movimentos manuais de caixa (abertura, suprimento, sangria, fechamento).
    Só recebem inserções.
    """

    __tablename__ = "movements"

    id = Column(Integer, primary_key=True, index=True)
    responsavel_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    tipo = Column(String(10), nullable=False)  # entrada / saida
    descricao = Column(String(255), nullable=True)
    valor = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
