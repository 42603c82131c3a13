import logging
from homeledger.db.session import engine
from homeledger.db.base import Base
logger = logging.getLogger(__name__)
def init():
    Base.metadata.create_all(bind=engine)
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init()
    logger.info(f"Database schema created on {engine.url.render_as_string(hide_password=True)}")
