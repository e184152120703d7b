"""
Script para limpar todas as bases e testar do zero.
- Limpa todos os dados do banco (sem apagar o arquivo)
- Recria o perfil admin padrão

Pode rodar mesmo com o Streamlit aberto.
"""
import logging
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config.database import DATABASE_URL, engine, init_db
from config.logging_config import setup_logging
from services.operador_service import ensure_default_admin

logger = logging.getLogger(__name__)

# Ordem: tabelas filhas primeiro (por causa das chaves estrangeiras)
TABLES_TO_TRUNCATE = [
    "sale_items",
    "sales",
    "movements",
    "caixas",
    "products",
    "categories",
    "profiles",
]


def main() -> None:
    setup_logging()
    logger.info("Limpando bases do PDV...")
    init_db()  # garante que tabelas existem

    sqlite = DATABASE_URL.startswith("sqlite")
    with engine.connect() as conn:
        for table in TABLES_TO_TRUNCATE:
            sql = f"DELETE FROM {table}" if sqlite else f"TRUNCATE TABLE {table} CASCADE"
            try:
                conn.execute(text(sql))
                conn.commit()
                logger.info("Limpo: %s", table)
            except SQLAlchemyError as e:
                conn.rollback()
                logger.warning("%s - %s", table, e)

    ensure_default_admin()
    logger.info("Pronto. Pode testar do zero. (Atualize a página no navegador se o Streamlit estiver aberto.)")


if __name__ == "__main__":
    main()
