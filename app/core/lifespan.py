from contextlib import asynccontextmanager
import logging

from app.core.config.scoring import get_scoring_config, scoring_config_path
from app.taxonomy import get_default_taxonomy_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # Load config and taxonomy up front so a broken file fails startup, not the first request.
    config = get_scoring_config()
    taxonomy = get_default_taxonomy_provider()
    logger.info(
        "scoring_engine_ready config=%s factors=%s role_families=%s",
        scoring_config_path(),
        len(config.get("factors", {})),
        len(taxonomy.family_order()),
    )
    yield
