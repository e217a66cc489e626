import os


def _env_bool(name: str, default: str) -> bool:
    return (os.getenv(name, default) or default).strip().lower() in ("1", "true", "yes", "on")


def _database_url() -> str:
    """DATABASE_URL wins; otherwise assemble a MySQL URL from the MYSQL_* variables."""
    url = os.environ.get("DATABASE_URL")
    if url:
        return url
    host = os.getenv("MYSQL_HOST", "mysql")
    port = os.getenv("MYSQL_PORT", "3306")
    user = os.getenv("MYSQL_USER", "root")
    password = os.getenv("MYSQL_PASSWORD", "")
    name = os.getenv("MYSQL_DATABASE", "mysql")
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?charset=utf8mb4"


class BaseConfig:
    # Trust anchors (env in prod; dev/test may use defaults)
    JWT_SECRET = os.environ.get("JWT_SECRET", "dev-not-secure")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")
    ADMIN_TOKEN_SALT = os.getenv("ADMIN_TOKEN_SALT", "admin-token-v1")
    ADMIN_TOKEN_TTL = int(os.getenv("ADMIN_TOKEN_TTL", str(24 * 60 * 60)))
    SECRET_KEY = JWT_SECRET

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_INIT_ON_STARTUP = _env_bool("DB_INIT_ON_STARTUP", "true")
    DB_INIT_RETRIES = int(os.getenv("DB_INIT_RETRIES", "5"))
    DB_INIT_RETRY_DELAY = float(os.getenv("DB_INIT_RETRY_DELAY", "2.0"))

    # Rate limiting
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL") or "memory://"
    # Off globally; only the submit endpoint is limited
    RATELIMIT_DEFAULT = None
    RATELIMIT_HEADERS_ENABLED = True
    SUBMIT_RATE_LIMIT = os.getenv("SUBMIT_RATE_LIMIT", "10 per 10 minutes")
    # Behind a reverse proxy the client address arrives in X-Forwarded-For.
    # Set to false when the app is exposed directly.
    TRUST_FORWARDED_FOR = _env_bool("TRUST_FORWARDED_FOR", "true")

    # Serving / logging
    PORT = int(os.getenv("PORT", "8080"))
    FORCE_HTTPS = _env_bool("FORCE_HTTPS", "true")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(BaseConfig):
    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    DB_INIT_ON_STARTUP = False
    DB_INIT_RETRY_DELAY = 0.0
    RATELIMIT_STORAGE_URI = "memory://"
    JWT_SECRET = "test-jwt-secret"
    SECRET_KEY = JWT_SECRET
    ADMIN_PASSWORD = "test-admin-password"


_ENV_MAP = {
    "development": DevelopmentConfig,
    "staging": ProductionConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}

# Must come from the environment in staging/production; never fall back to defaults there.
REQUIRED_IN_PRODUCTION = ("JWT_SECRET", "ADMIN_PASSWORD")
REQUIRED_DB_IN_PRODUCTION = ("DATABASE_URL", "MYSQL_HOST")


def get_config():
    env = os.environ.get("APP_ENV", "development").lower()
    return _ENV_MAP.get(env, DevelopmentConfig)
