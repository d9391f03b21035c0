import logging
import os
from datetime import datetime, timezone

from flask import Flask, request
from flask_login import current_user

from config import Config
from extensions import db, mail, migrate, login_manager, csrf, compress, server_session

access_logger = logging.getLogger("online_bazar.access")


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Lưu ảnh sản phẩm
    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    configure_logging(app)

    # Khởi tạo db, migrate, mail, session, csrf, nén
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    app.config.setdefault("SESSION_SQLALCHEMY", db)
    server_session.init_app(app)
    csrf.init_app(app)
    compress.init_app(app)

    # Login Manager
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Please log in to access this page."
    login_manager.login_message_category = "error"

    # Import models sau khi db đã init
    import models  # noqa: F401

    # Import blueprints
    from blueprints.admin.routes import admin_bp
    app.register_blueprint(admin_bp, url_prefix="/admin")

    from blueprints.shop.routes import shop_bp
    app.register_blueprint(shop_bp)

    from blueprints.auth.routes import auth_bp
    app.register_blueprint(auth_bp)

    from blueprints.errors.routes import errors_bp
    app.register_blueprint(errors_bp)

    @app.context_processor
    def inject_locals():
        return {
            "is_authenticated": current_user.is_authenticated,
            "shop_name": app.config["SHOP_NAME"],
            "year": datetime.now().year,
        }

    @app.after_request
    def log_request(response):
        access_logger.info(
            '%s - %s [%s] "%s %s %s" %s %s "%s" "%s"',
            request.remote_addr or "-",
            current_user.get_id() if current_user.is_authenticated else "-",
            datetime.now(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S %z"),
            request.method,
            request.full_path.rstrip("?"),
            request.environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
            response.status_code,
            response.content_length if response.content_length is not None else "-",
            request.referrer or "-",
            request.user_agent.string or "-",
        )
        return response

    return app


def configure_logging(app):
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Access log theo định dạng "combined", ghi nối tiếp vào file
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False
    log_file = app.config.get("ACCESS_LOG_FILE")
    if log_file and not any(
        getattr(h, "baseFilename", None) == os.path.abspath(log_file) for h in access_logger.handlers
    ):
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        access_logger.addHandler(handler)


@login_manager.user_loader
def load_user(user_id):
    from models import User
    return db.session.get(User, int(user_id))


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
    app.run(debug=True)
