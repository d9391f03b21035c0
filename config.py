import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "secret_key")
    SHOP_NAME = os.getenv("SHOP_NAME", "Online Bazar")

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///" + os.path.join(BASE_DIR, "shop.db"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Server-side sessions live in the "sessions" table
    SESSION_TYPE = "sqlalchemy"
    SESSION_SQLALCHEMY_TABLE = "sessions"
    SESSION_PERMANENT = True
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.getenv("SESSION_LIFETIME_HOURS", 24)))

    # Product images
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "images"))
    ALLOWED_IMAGE_MIMETYPES = {"image/png", "image/jpg", "image/jpeg"}
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB/request

    ITEMS_PER_PAGE = int(os.getenv("ITEMS_PER_PAGE", 2))
    RESET_TOKEN_TTL = timedelta(hours=1)

    # Flask-Mail
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", 587))
    MAIL_USE_TLS = os.getenv("MAIL_USE_TLS", "1") == "1"
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", os.getenv("MAIL_USERNAME") or "shop@example.com")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    ACCESS_LOG_FILE = os.getenv("ACCESS_LOG_FILE", os.path.join(BASE_DIR, "access.log"))


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = "shop@example.com"
    ACCESS_LOG_FILE = None
    ITEMS_PER_PAGE = 2
