# create_tables.py
import logging

from database import engine, Base
# Importa todos los modelos para que se registren con Base
from modules.documents.models.document import SignedDocumentRecord  # noqa: F401

logger = logging.getLogger(__name__)


def create_tables():
    """Crea todas las tablas en la base de datos"""
    logger.info("Tables to create: %s", list(Base.metadata.tables.keys()))
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
    logger.info("Tables created")
