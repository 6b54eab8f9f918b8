import os
from dotenv import load_dotenv
load_dotenv()


class Config:
    """Base configuration class"""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key")

    # Upload configuration
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 64 * 1024 * 1024))
    ALLOWED_EXTENSIONS = {".csv", ".xlsx"}

    # Security settings
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Chart canvas (viewBox of the dashboard cards)
    CHART_WIDTH = int(os.getenv("CHART_WIDTH", 500))
    CHART_HEIGHT = int(os.getenv("CHART_HEIGHT", 320))

    # Upper bound on force-layout relaxation steps per request
    FORCE_MAX_STEPS = int(os.getenv("FORCE_MAX_STEPS", 300))


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    LOG_LEVEL = "DEBUG"


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
