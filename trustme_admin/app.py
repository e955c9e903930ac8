# ---------------------------- app.py ----------------------------
from flask import Flask
from .config import Config
from .extensions import db, migrate
from .gateway import Gateway
from .json_provider import MoneyJSONProvider
from .routes import register_routes
from .cli import register_commands


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json = MoneyJSONProvider(app)

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    Gateway(db).init_app(app)

    # Register all routes
    register_routes(app)
    register_commands(app)

    # Root check
    @app.route("/")
    def index():
        return {"message": "TrustMe admin API is running"}, 200

    return app

