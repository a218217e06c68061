"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


_TRUTHY = {"1", "true", "yes", "on"}


class Config:
    TESTING = os.getenv("TESTING", "false").lower() in _TRUTHY
    DEBUG = os.getenv("DEBUG", "false").lower() in _TRUTHY

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Postgresql Database settings (read by the Prisma engine)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # OpenAI Assistants
    OPENAI_KEY = os.getenv("OPENAI_API_KEY", "")
    ASSISTANT_MODEL = os.getenv("ASSISTANT_MODEL", "gpt-4-turbo-preview")
    ASSISTANT_INSTRUCTIONS = os.getenv(
        "ASSISTANT_INSTRUCTIONS",
        "You are an AI email assistant. Respond professionally and helpfully "
        "to customer inquiries.",
    )
    BOT_API_KEY_PREFIX = os.getenv("BOT_API_KEY_PREFIX", "agc-")

    # Bot defaults
    BOT_FORWARD_EMAIL_DISPLAY = os.getenv(
        "BOT_FORWARD_EMAIL_DISPLAY", "Forward your emails here"
    )
    BOT_DEFAULT_RESPONSE_RATE = float(os.getenv("BOT_DEFAULT_RESPONSE_RATE", "100"))

    # Template defaults
    TEMPLATE_DEFAULT_LANGUAGE = os.getenv("TEMPLATE_DEFAULT_LANGUAGE", "en")

    # Auth
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "emailbots")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "emailbots-dashboard")

    # Dashboard settings defaults
    DEFAULT_COMPANY_NAME = os.getenv("DEFAULT_COMPANY_NAME", "AgentChief EmailBots")
    DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "ai@example.com")
    DEFAULT_REPLY_TO_EMAIL = os.getenv("DEFAULT_REPLY_TO_EMAIL", "support@example.com")

    # HTTP
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Import / export
    IMPORT_ALLOWED_EXTENSIONS = os.getenv("IMPORT_ALLOWED_EXTENSIONS", "csv,xlsx").split(
        ","
    )


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
