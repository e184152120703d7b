from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from config.database import Base

STATUS_ABERTO = "aberto"
STATUS_FECHADO = "fechado"


class Caixa(Base):
    """
    Sessões de caixa (turno de um colaborador).
    Apenas uma sessão com status 'aberto' pode existir por colaborador.
    """

    __tablename__ = "caixas"
    __table_args__ = (
        Index(
            "uq_caixas_aberto_por_colaborador",
            "colaborador_id",
            unique=True,
            sqlite_where=text("status = 'aberto'"),
            postgresql_where=text("status = 'aberto'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    colaborador_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    valor_abertura = Column(Float, nullable=False, default=0.0)
    data_abertura = Column(DateTime, nullable=False, default=datetime.utcnow)
    status = Column(String(20), nullable=False, default=STATUS_ABERTO)  # aberto / fechado
    valor_fechamento = Column(Float, nullable=True)
    data_fechamento = Column(DateTime, nullable=True)

    colaborador = relationship("Profile")

    @property
    def aberto(self) -> bool:
        return self.status == STATUS_ABERTO
