import logging
from app.main import app

# Send startup and request errors of the movies API to the platform's log stream
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

logger.info("Movies API entrypoint loaded")

# The hosting platform imports `app` from here to serve /movies and the award analytics
__all__ = ["app"]
