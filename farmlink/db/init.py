import logging

from sqlalchemy.engine import Engine

from farmlink.db.session import Base
from farmlink.models.user import User
from farmlink.models.crop import Crop
from farmlink.models.product import Product

logger = logging.getLogger(__name__)


def init_db(engine: Engine):
    # Create all tables
    Base.metadata.create_all(bind=engine)
    for table in (User.__tablename__, Crop.__tablename__, Product.__tablename__):
        logger.info("%s table ready", table)
