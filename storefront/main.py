# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.data.database import Base, engine
from storefront.utils.logging import configure_logging, get_logger

# import wszystkich modeli przed create_all
import storefront.data.models  # noqa: F401

configure_logging()
logger = get_logger(__name__)

Base.metadata.create_all(bind=engine)
logger.info(f"Tabele w bazie: {sorted(Base.metadata.tables.keys())}")

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
