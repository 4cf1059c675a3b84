import structlog
import uvicorn

from taskboard.app import App
from taskboard.config import Config
from taskboard.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def run_server(app: App, config: Config) -> None:
    """Serve the API with uvicorn.

    log_config=None keeps uvicorn from replacing the handlers installed by setup_logging.
    """
    logger.info(
        "taskboard_starting",
        host=config.host,
        port=config.port,
        telegram_mirroring=bool(config.telegram_bot_token),
        commit=config.git_commit_hash,
    )
    uvicorn.run(create_fastapi_app(app, config), host=config.host, port=config.port, log_config=None)
