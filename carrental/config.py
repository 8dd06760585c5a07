import os


def normalize_database_url(raw_url: str) -> str:
    if raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql://", 1)
    return raw_url


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-unsafe-key")
    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.getenv("DATABASE_URL", "sqlite:///instance/carrental.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per day;80 per hour")
    RATELIMIT_BOOKING = os.getenv("RATELIMIT_BOOKING", "20 per hour")
    RATELIMIT_PAYMENT = os.getenv("RATELIMIT_PAYMENT", "10 per hour")

    # The identity provider sits in front of the API and forwards the
    # authenticated subject in this header.
    IDENTITY_HEADER = os.getenv("IDENTITY_HEADER", "X-Identity-Subject")

    PAYMENT_GATEWAY = os.getenv("PAYMENT_GATEWAY", "simulated")
    PAYMENT_SUCCESS_RATE = float(os.getenv("PAYMENT_SUCCESS_RATE", "0.95"))
    PAYMENT_GATEWAY_DELAY = float(os.getenv("PAYMENT_GATEWAY_DELAY", "1.0"))
    INVOICE_BASE_URL = os.getenv("INVOICE_BASE_URL", "https://citycars.az/invoices")

    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "log")
    MAIL_SENDER = os.getenv("MAIL_SENDER", "CityCars <noreply@citycars.az>")
    MAIL_SMTP_HOST = os.getenv("MAIL_SMTP_HOST", "smtp.gmail.com")
    MAIL_SMTP_PORT = int(os.getenv("MAIL_SMTP_PORT", "587"))
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")

    SENTRY_DSN = os.getenv("SENTRY_DSN")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    PAYMENT_GATEWAY_DELAY = 0.0


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False
    PAYMENT_GATEWAY_DELAY = 0.0
    MAIL_BACKEND = "log"


config_by_env = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
