from contextlib import asynccontextmanager
import logging

from jobfillr.catalog import get_default_catalog
from jobfillr.resolution.synthesis import check_synthesis_coverage
from jobfillr.storage import get_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    catalog = get_default_catalog()
    logger.info("catalog_ready templates=%s categories=%s", len(catalog), len(catalog.categories()))
    for problem in check_synthesis_coverage(catalog):
        logger.warning("synthesis_coverage %s", problem)
    yield
    get_database().close()
