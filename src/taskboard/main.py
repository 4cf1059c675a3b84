"""Console entry point: `taskboard` starts the API server."""

from taskboard.app import App
from taskboard.config import Config
from taskboard.logging import setup_logging
from taskboard.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(debug=config.debug)
    run_server(App(config), config)


if __name__ == "__main__":
    main()
