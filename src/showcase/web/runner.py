"""Uvicorn server runner."""

import copy

import structlog
import uvicorn
from uvicorn.config import LOGGING_CONFIG

from showcase.app import App
from showcase.config import Config
from showcase.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def run_server(app: App, config: Config) -> None:
    """Run Uvicorn behind a reverse proxy, with plain-text access logs."""
    fastapi_app = create_fastapi_app(app, config)

    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"

    logger.info(
        "server_starting",
        host=config.host,
        port=config.port,
        commit=config.git_commit_hash,
        build_time=config.build_time,
    )
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=log_config,
        access_log=True,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
