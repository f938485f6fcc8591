"""
Script para inicializar o banco de dados do app de corridas.
- Cria as tabelas shifts e sales
- Cria o índice que impede dois turnos abertos ao mesmo tempo
"""
import sys

from config.database import create_db_engine, describe_database, init_db, resolve_database_url
from config.settings import setup_logging


def main() -> int:
    setup_logging()
    url = resolve_database_url()
    info = describe_database(url)
    if not info["valid"]:
        print("❌ DATABASE_URL inválida. Corrija o .env e tente novamente.")
        return 1
    print(f"📦 Inicializando banco de dados ({info['url']})...")
    init_db(create_db_engine(url))
    print("✅ Tabelas e índice de turno aberto criados (se não existiam).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
