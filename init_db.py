"""
Script para inicializar o banco de dados do PDV.
- Cria todas as tabelas
- Garante a existência de um perfil admin padrão
"""
import logging

from config.database import init_db
from config.logging_config import setup_logging
from services.operador_service import ensure_default_admin

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging()
    logger.info("Inicializando banco de dados do PDV...")
    init_db()
    logger.info("Tabelas criadas (se não existiam).")
    ensure_default_admin()
    logger.info("Perfil admin garantido.")


if __name__ == "__main__":
    main()
