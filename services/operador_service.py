"""
Operadores do PDV e operador atual da sessão do navegador.

Não há login: o operador é escolhido entre os perfis ativos e as páginas
repassam o `id` dele explicitamente para os serviços.
"""
import logging
from typing import Optional, Sequence

import streamlit as st
from sqlalchemy import select
from sqlalchemy.orm import Session

from config.database import SessionLocal
from models.profile import Profile
from services.errors import ValidationError, transacao

logger = logging.getLogger(__name__)

TIPOS_PERFIL = ("admin", "colaborador")


class OperatorService:
    """
    Perfis e estado do operador atual (st.session_state).
    """

    @staticmethod
    def criar_perfil(db: Session, nome: str, tipo: str = "colaborador") -> Profile:
        nome = (nome or "").strip()
        if not nome:
            raise ValidationError("Informe o nome do operador.")
        if tipo not in TIPOS_PERFIL:
            raise ValidationError("Tipo de perfil inválido.")
        perfil = Profile(nome=nome, tipo=tipo, ativo=True)
        with transacao(db):
            db.add(perfil)
        logger.info("Perfil criado: %s (%s)", perfil.nome, perfil.tipo)
        return perfil

    @staticmethod
    def listar_perfis(db: Session, apenas_ativos: bool = True) -> list[Profile]:
        stmt = select(Profile).order_by(Profile.nome)
        if apenas_ativos:
            stmt = stmt.where(Profile.ativo.is_(True))
        return db.execute(stmt).scalars().all()

    # ----- Session / estado -----

    @staticmethod
    def selecionar(perfil: Profile) -> None:
        st.session_state.operador = {
            "id": perfil.id,
            "nome": perfil.nome,
            "tipo": perfil.tipo,
        }

    @staticmethod
    def sair() -> None:
        st.session_state.operador = None
        st.session_state.pop("carrinho", None)
        st.session_state.pop("comanda_id", None)

    @staticmethod
    def operador_atual() -> Optional[dict]:
        return st.session_state.get("operador")

    # ----- Requisitos de acesso -----

    @staticmethod
    def exigir_operador() -> dict:
        """
        Garante que um operador foi escolhido; se não, interrompe a página.
        """
        operador = OperatorService.operador_atual()
        if not operador:
            st.warning("Escolha o operador no menu lateral para acessar esta página.")
            st.stop()
        return operador

    @staticmethod
    def exigir_tipo(tipos: Sequence[str]) -> dict:
        operador = OperatorService.exigir_operador()
        if operador.get("tipo") not in tipos:
            st.error("Você não tem permissão para acessar esta funcionalidade.")
            st.stop()
        return operador


def ensure_default_admin() -> None:
    """
    Garante a existência de um perfil admin. Executado na inicialização da aplicação.
    """
    db = SessionLocal()
    try:
        admin = db.execute(select(Profile).where(Profile.tipo == "admin")).first()
        if not admin:
            OperatorService.criar_perfil(db, "Administrador", "admin")
    finally:
        db.close()
