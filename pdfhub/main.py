import atexit

from flask import Flask

from pdfhub.api.app import build_app
from pdfhub.config.settings import Settings
from pdfhub.container import build_services
from pdfhub.database.connection import Database
from pdfhub.database.schema import create_schema
from pdfhub.logging.logger import Log


def create_app(settings: Settings | None = None) -> Flask:
    """Initialize pool -> ensure schema -> build services -> build app.

    Also the factory used by `flask --app pdfhub.main ...`.
    """
    settings = settings or Settings()
    Log.configure(settings.log_level)
    db = Database.from_settings(settings)
    atexit.register(db.close)
    create_schema(db)
    return build_app(settings, build_services(settings, db))


def main() -> None:
    """Entry point: run the HTTP service with one thread per request."""
    settings = Settings()
    app = create_app(settings)
    Log.info(f"Starting pdfhub on {settings.host}:{settings.port}")
    app.run(host=settings.host, port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
