"""
StudyKit Configuration
Supports AWS Parameter Store for production secrets
"""
import os
from functools import lru_cache

import boto3


def get_parameter(name: str, default: str = "") -> str:
    """Get parameter from AWS Parameter Store or environment"""
    # Environment variable takes precedence
    env_key = name.upper().replace("-", "_").replace("/", "_")
    if env_key in os.environ:
        return os.environ[env_key]

    if os.environ.get("USE_PARAMETER_STORE"):
        try:
            ssm = boto3.client("ssm", region_name=os.environ.get("AWS_REGION", "us-west-2"))
            path = os.environ.get("PARAMETER_STORE_PATH", "/studykit/prod/")
            response = ssm.get_parameter(Name=f"{path}{name}", WithDecryption=True)
            return response["Parameter"]["Value"]
        except Exception:
            pass

    return default


class Config:
    """Base configuration"""
    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-in-production")
    PORT = int(os.environ.get("PORT", "5000"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # File uploads
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024  # 50MB
    TEMP_IMAGES_DIR = os.environ.get("TEMP_IMAGES_DIR", "./temp_images")
    TEMP_DOCS_DIR = os.environ.get("TEMP_DOCS_DIR", "./temp_docs")

    # OCR
    OCR_MAX_WIDTH = int(os.environ.get("OCR_MAX_WIDTH", "1024"))
    OCR_MAX_PAGES = int(os.environ.get("OCR_MAX_PAGES", "12"))
    OCR_LANG = os.environ.get("OCR_LANG", "eng")

    # Generation backend
    GENERATION_BACKEND = os.environ.get("GENERATION_BACKEND", "gemini")
    MAX_DOCUMENT_CHARS = 30000
    LLM_TIMEOUT = int(os.environ.get("LLM_TIMEOUT", "120"))

    # Gemini
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")

    # OpenAI
    OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4.1")

    # App Version
    APP_VERSION = os.environ.get("APP_VERSION", "2026.10")
    BUILD_TIME = os.environ.get("BUILD_TIME", "")
    GIT_COMMIT = os.environ.get("GIT_COMMIT", "")


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    # Override with Parameter Store in production
    SECRET_KEY = get_parameter("secret-key", Config.SECRET_KEY)
    GEMINI_API_KEY = get_parameter("gemini-api-key", Config.GEMINI_API_KEY)
    OPENAI_API_KEY = get_parameter("openai-api-key", Config.OPENAI_API_KEY)


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    GENERATION_BACKEND = "gemini"
    GEMINI_API_KEY = "test-gemini-key"
    LOG_LEVEL = "DEBUG"


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}


@lru_cache()
def _config_for(env: str):
    return config.get(env, DevelopmentConfig)


def get_config(env: str = None):
    """Get configuration by environment name"""
    return _config_for(env or os.environ.get("FLASK_ENV", "development"))
