from datetime import timedelta

import click
from flask import Flask
from flask_jwt_extended import JWTManager

from pdfhub.api.errors import register_error_handlers
from pdfhub.api.responses import success
from pdfhub.api.routes import admin, auth, documents
from pdfhub.config.settings import Settings
from pdfhub.container import Services

jwt = JWTManager()

# multipart framing on top of the raw file bytes
FORM_OVERHEAD_BYTES = 1024 * 1024


def build_app(settings: Settings, services: Services) -> Flask:
    """Create the Flask app around already-built services."""
    settings.check_startup()
    app = Flask(__name__)
    app.config["JWT_SECRET_KEY"] = settings.jwt_secret_key
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(hours=settings.session_ttl_hours)
    app.config["MAX_CONTENT_LENGTH"] = (
        settings.max_upload_bytes * settings.max_merge_files + FORM_OVERHEAD_BYTES
    )
    app.config["PDFHUB_MAX_UPLOAD_BYTES"] = settings.max_upload_bytes
    app.extensions["pdfhub"] = services

    jwt.init_app(app)

    app.register_blueprint(auth.bp)
    app.register_blueprint(documents.bp)
    app.register_blueprint(admin.bp)
    register_error_handlers(app, debug=settings.is_dev)

    @app.get("/health")
    def health():
        return success({"status": "ok"})

    @app.cli.command("sweep-expired")
    @click.option("--loop", is_flag=True, help="Keep sweeping every SWEEP_INTERVAL_SECONDS.")
    def sweep_expired_command(loop: bool) -> None:
        """Delete documents past their expiry along with their stored bytes."""
        if loop:
            services.sweeper.run()
        else:
            removed = services.sweeper.sweep_once()
            click.echo(f"Removed {removed} expired document(s)")

    return app
