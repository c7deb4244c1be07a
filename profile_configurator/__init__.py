from flask import Flask
from .config import AppConfig
from .routes import create_blueprint

def create_app(cfg: AppConfig) -> Flask:
    app = Flask(__name__)
    app.register_blueprint(create_blueprint())
    app.config["CFG"] = cfg
    return app
