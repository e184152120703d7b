"""
Erros de negócio do PDV e controle de transação.

As páginas capturam `PdvError` no ponto da ação do usuário e exibem uma
notificação; nenhum erro sobe além da página.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class PdvError(Exception):
    """Erro base do PDV. A mensagem é exibida ao usuário."""


class ValidationError(PdvError):
    """Entrada ausente ou inválida (valor não numérico, pagamento não informado...)."""


class ConflictError(PdvError):
    """Regra de negócio violada pelo estado atual (estoque insuficiente, caixa já fechado...)."""


class NotFoundError(PdvError):
    """Caixa, venda, item ou produto não existe mais."""


class PersistenceError(PdvError):
    """Falha do banco de dados. Não há nova tentativa automática."""


@contextmanager
def transacao(db: Session):
    """
    Executa um bloco de escritas como uma única transação.
    Commit no final; rollback em qualquer erro.
    """
    try:
        yield db
        db.commit()
    except PdvError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Falha de persistência, transação desfeita")
        raise PersistenceError("Falha ao gravar no banco de dados. Tente novamente.") from exc
