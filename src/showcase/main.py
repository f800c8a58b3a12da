"""Application entry point for the showcase backend server."""

from showcase.app import App
from showcase.config import Config
from showcase.logging import setup_logging
from showcase.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
