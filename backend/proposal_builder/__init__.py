from flask import Flask, send_file, current_app
from .config import config_by_name
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .errors import register_error_handlers
from flask_swagger_ui import get_swaggerui_blueprint
import logging
import os


def create_app(config_name: str = "development") -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # -------------------------------------------------
    # Logging
    # -------------------------------------------------
    level = app.config["LOG_LEVEL"]
    app.logger.setLevel(level)
    logging.getLogger("proposal_builder").setLevel(level)

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    from . import models  # noqa: F401  (register tables with SQLAlchemy)

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML (PUBLIC)
    # -------------------------------------------------
    @app.route("/openapi/proposals.yaml", methods=["GET"], endpoint="openapi_proposals")
    def serve_openapi():
        spec_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "proposals_openapi.yaml",
        )

        if not os.path.exists(spec_path):
            raise FileNotFoundError("proposals_openapi.yaml not found")

        return send_file(
            spec_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/proposals.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "Proposal Builder API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    app.logger.info("Proposal builder started with %s config", config_name)
    return app
