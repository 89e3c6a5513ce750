from functools import lru_cache

from jobfillr.core.config import settings
from jobfillr.storage import TemplateStore, get_database

from .local_catalog import LocalCatalog, load_seed_templates
from .provider import TemplateCatalog
from .seed import seed_templates


@lru_cache(maxsize=1)
def get_default_catalog() -> LocalCatalog:
    """Process-wide read-only catalog: seeded (idempotently) and loaded once."""
    store = TemplateStore(get_database())
    if settings.seed_templates_on_startup:
        seed_templates(store, load_seed_templates())
    return LocalCatalog(store.list_templates())


__all__ = [
    "LocalCatalog",
    "TemplateCatalog",
    "get_default_catalog",
    "load_seed_templates",
    "seed_templates",
]
