import os

from flask import Flask, jsonify
from flask_login import LoginManager
from werkzeug.security import generate_password_hash

from catalog import CatalogSelector, LiveCatalog, StaticFallbackCatalog
from models import User, db
from settings import load_settings

login_manager = LoginManager()


# ----------------------------
# CONFIG
# ----------------------------
def default_config():
    env = os.environ
    return {
        "SECRET_KEY": env.get("SECRET_KEY", "change-this-secret-key"),
        "SQLALCHEMY_DATABASE_URI": env.get("DATABASE_URL", "sqlite:///bracelet_store.db"),
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "LOG_LEVEL": env.get("LOG_LEVEL", "INFO"),

        # SMTP
        "MAIL_ENABLED": env.get("MAIL_ENABLED", "false").lower() in ("true", "1", "yes"),
        "MAIL_SERVER": env.get("MAIL_SERVER", "localhost"),
        "MAIL_PORT": int(env.get("MAIL_PORT", "587")),
        "MAIL_USE_TLS": env.get("MAIL_USE_TLS", "true").lower() in ("true", "1", "yes"),
        "MAIL_USERNAME": env.get("MAIL_USERNAME", "orders@example.com"),
        "MAIL_PASSWORD": env.get("MAIL_PASSWORD", ""),

        "ADMIN_EMAIL": env.get("ADMIN_EMAIL", "admin@example.com"),
        "ADMIN_PASSWORD": env.get("ADMIN_PASSWORD"),

        # YAML file with the `store:` section, see settings.py
        "BRACELET_CONFIG_FILE": env.get("BRACELET_CONFIG_FILE"),
        "BRACELET_SETTINGS": {},
    }


# ----------------------------
# LOGIN MANAGER
# ----------------------------
@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"ok": False, "error": "login_required"}), 401


# ----------------------------
# INIT
# ----------------------------
def create_admin(app):
    """Create the admin account once, when an admin password is configured."""
    password = app.config.get("ADMIN_PASSWORD")
    if not password:
        return None

    email = app.config["ADMIN_EMAIL"]
    admin = User.query.filter_by(email=email).first()
    if not admin:
        admin = User(
            email=email,
            name="Store Admin",
            password_hash=generate_password_hash(password),
            is_admin=True,
        )
        db.session.add(admin)
        db.session.commit()
        app.logger.info("Admin user created with email %s", email)
    return admin


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.update(default_config())
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    settings = load_settings(
        app.config.get("BRACELET_CONFIG_FILE"),
        **app.config.get("BRACELET_SETTINGS", {}),
    )
    app.extensions["bracelet_settings"] = settings
    app.extensions["bracelet_catalog"] = CatalogSelector(
        LiveCatalog(settings), StaticFallbackCatalog()
    )

    db.init_app(app)
    login_manager.init_app(app)

    from routes import store
    app.register_blueprint(store)

    with app.app_context():
        db.create_all()
        create_admin(app)

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
