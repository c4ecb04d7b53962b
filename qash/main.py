import uvicorn

from qash.api.app import create_app
from qash.config.settings import Settings
from qash.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> build the app -> serve it."""
    settings = Settings()
    Log.configure(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
