"""
Sessões de caixa: abertura, movimentos, resumo e fechamento.

Estados: aberto -> fechado (terminal). Um caixa aberto por engano não é
cancelado; corrige-se com um movimento compensatório.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.caixa import STATUS_ABERTO, STATUS_FECHADO, Caixa
from models.movement import TIPO_ENTRADA, TIPO_SAIDA, TIPOS_MOVIMENTO, Movement
from models.profile import Profile
from models.sale import STATUS_FINALIZADA, Sale
from services.errors import ConflictError, NotFoundError, ValidationError, transacao
from services.resumo import ResumoCaixa, calcular_resumo
from services.valores import ler_valor

logger = logging.getLogger(__name__)

DESCRICAO_ABERTURA = "Abertura de Caixa"
DESCRICAO_FECHAMENTO = "Fechamento de Caixa"


def caixa_aberto(db: Session, operador_id: int) -> Optional[Caixa]:
    return db.execute(
        select(Caixa).where(
            Caixa.colaborador_id == operador_id, Caixa.status == STATUS_ABERTO
        )
    ).scalar_one_or_none()


def exigir_caixa_aberto(db: Session, operador_id: int) -> Caixa:
    caixa = caixa_aberto(db, operador_id)
    if caixa is None:
        raise ConflictError("Caixa fechado! Abra o caixa para continuar.")
    return caixa


def abrir_caixa(db: Session, operador_id: int, valor_abertura) -> Caixa:
    """
    Abre o caixa do operador e registra o valor de abertura como movimento de entrada
    com o mesmo horário da abertura.
    """
    valor = ler_valor(valor_abertura, "Valor de abertura")
    if db.get(Profile, operador_id) is None:
        raise NotFoundError("Operador não encontrado.")
    if caixa_aberto(db, operador_id) is not None:
        raise ValidationError("Já existe um caixa aberto para este operador.")

    agora = datetime.utcnow()
    caixa = Caixa(
        colaborador_id=operador_id,
        valor_abertura=valor,
        data_abertura=agora,
        status=STATUS_ABERTO,
    )
    with transacao(db):
        db.add(caixa)
        db.add(
            Movement(
                responsavel_id=operador_id,
                tipo=TIPO_ENTRADA,
                descricao=DESCRICAO_ABERTURA,
                valor=valor,
                created_at=agora,
            )
        )
        try:
            # o índice parcial barra a segunda abertura concorrente
            db.flush()
        except IntegrityError as exc:
            raise ValidationError("Já existe um caixa aberto para este operador.") from exc

    logger.info("Caixa %s aberto por %s com %.2f", caixa.id, operador_id, valor)
    return caixa


def registrar_movimento(
    db: Session, operador_id: int, tipo: str, valor, descricao: str = ""
) -> Movement:
    """
    Suprimento (entrada) ou sangria (saída) durante o turno.
    """
    if tipo not in TIPOS_MOVIMENTO:
        raise ValidationError("Tipo de movimento inválido.")
    quantia = ler_valor(valor)
    if quantia == 0:
        raise ValidationError("Informe um valor maior que zero.")
    exigir_caixa_aberto(db, operador_id)

    movimento = Movement(
        responsavel_id=operador_id,
        tipo=tipo,
        descricao=(descricao or "").strip() or ("Suprimento" if tipo == TIPO_ENTRADA else "Sangria"),
        valor=quantia,
    )
    with transacao(db):
        db.add(movimento)
    logger.info("Movimento %s de %.2f registrado por %s", tipo, quantia, operador_id)
    return movimento


def vendas_do_caixa(db: Session, caixa: Caixa) -> list[Sale]:
    return db.execute(
        select(Sale)
        .where(
            Sale.colaborador_id == caixa.colaborador_id,
            Sale.status == STATUS_FINALIZADA,
            Sale.updated_at >= caixa.data_abertura,
        )
        .order_by(Sale.created_at.desc())
    ).scalars().all()


def movimentos_do_caixa(db: Session, caixa: Caixa) -> list[Movement]:
    return db.execute(
        select(Movement)
        .where(
            Movement.responsavel_id == caixa.colaborador_id,
            Movement.created_at >= caixa.data_abertura,
        )
        .order_by(Movement.created_at.desc())
    ).scalars().all()


def resumo_do_caixa(db: Session, caixa: Caixa) -> ResumoCaixa:
    return calcular_resumo(vendas_do_caixa(db, caixa), movimentos_do_caixa(db, caixa))


def carregar_resumo(db: Session, operador_id: int) -> ResumoCaixa:
    caixa = caixa_aberto(db, operador_id)
    if caixa is None:
        raise NotFoundError("Nenhum caixa aberto para este operador.")
    return resumo_do_caixa(db, caixa)


def fechar_caixa(db: Session, caixa_id: int) -> Caixa:
    """
    Fecha o caixa registrando a saída do valor total movimentado
    (vendas + entradas - saídas) e carimba valor e data de fechamento.
    """
    caixa = db.get(Caixa, caixa_id)
    if caixa is None:
        raise NotFoundError("Caixa não encontrado.")
    if caixa.status != STATUS_ABERTO:
        raise ConflictError("Este caixa já está fechado.")

    resumo = resumo_do_caixa(db, caixa)
    # TODO: confirmar com o dono se o fechamento deve ser só o saldo físico
    valor_fechamento = resumo.valor_fechamento
    agora = datetime.utcnow()

    with transacao(db):
        db.add(
            Movement(
                responsavel_id=caixa.colaborador_id,
                tipo=TIPO_SAIDA,
                descricao=DESCRICAO_FECHAMENTO,
                valor=valor_fechamento,
                created_at=agora,
            )
        )
        caixa.status = STATUS_FECHADO
        caixa.valor_fechamento = valor_fechamento
        caixa.data_fechamento = agora

    logger.info("Caixa %s fechado com %.2f", caixa.id, valor_fechamento)
    return caixa


def listar_caixas(
    db: Session, operador_id: Optional[int] = None, limite: int = 50
) -> list[Caixa]:
    stmt = select(Caixa).order_by(Caixa.id.desc()).limit(limite)
    if operador_id is not None:
        stmt = stmt.where(Caixa.colaborador_id == operador_id)
    return db.execute(stmt).scalars().all()
