"""
Notificação de alterações no banco (equivalente local ao realtime do backend).

Cada transação registra as tabelas que alterou; no commit, a versão de cada
tabela é incrementada. Uma versão nova é apenas um sinal de invalidação:
quem acompanha a tabela recarrega tudo o que depende dela.
Transações desfeitas não alteram versão nenhuma.
"""
import logging
import threading
from collections import defaultdict
from typing import Dict, Tuple

from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_INFO_KEY = "pdv_alteracoes"

_lock = threading.Lock()
_versoes: Dict[str, int] = defaultdict(int)


def versao(*tabelas: str) -> Tuple[int, ...]:
    """Versão atual das tabelas; muda a cada commit que as altera."""
    with _lock:
        return tuple(_versoes[tabela] for tabela in tabelas)


def _registrar(session: Session, tabela: str) -> None:
    session.info.setdefault(_INFO_KEY, set()).add(tabela)


@event.listens_for(Session, "after_flush")
def _after_flush(session, flush_context):
    for obj in session.new:
        _registrar(session, obj.__table__.name)
    for obj in session.dirty:
        if session.is_modified(obj, include_collections=False):
            _registrar(session, obj.__table__.name)
    for obj in session.deleted:
        _registrar(session, obj.__table__.name)


@event.listens_for(Session, "do_orm_execute")
def _do_orm_execute(orm_execute_state):
    # UPDATE/DELETE em massa não passam pelo flush
    if not (orm_execute_state.is_update or orm_execute_state.is_delete):
        return
    tabela = getattr(orm_execute_state.statement, "table", None)
    if tabela is not None:
        _registrar(orm_execute_state.session, tabela.name)


@event.listens_for(Session, "after_commit")
def _after_commit(session):
    alteradas = session.info.pop(_INFO_KEY, None)
    if not alteradas:
        return
    with _lock:
        for tabela in alteradas:
            _versoes[tabela] += 1
    logger.debug("Tabelas alteradas: %s", ", ".join(sorted(alteradas)))


@event.listens_for(Session, "after_rollback")
def _after_rollback(session):
    session.info.pop(_INFO_KEY, None)
