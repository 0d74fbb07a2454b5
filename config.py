import os

from dotenv import load_dotenv

# Load environment variables from a local .env file, if present
load_dotenv()

REQUIRED_ENV_VARS = ('DATABASE_URL',)


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing"""


def normalize_database_url(url):
    """SQLAlchemy only understands the postgresql:// scheme"""
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def engine_options_for(url):
    """Connection pool settings; SQLite's pools reject pool_size"""
    if not url or url.startswith('sqlite'):
        return {}
    return {
        'pool_size': 10,
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }


class Config:
    """Base configuration"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'CHANGE-THIS-SECRET-KEY-IN-PRODUCTION')
    PORT = int(os.environ.get('PORT', 5000))
    ENV_NAME = os.environ.get('FLASK_ENV', 'development')

    # Database Settings
    SQLALCHEMY_DATABASE_URI = normalize_database_url(os.environ.get('DATABASE_URL'))
    SQLALCHEMY_ENGINE_OPTIONS = engine_options_for(SQLALCHEMY_DATABASE_URI)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Contact storage backend: 'database' or 'memory'
    CONTACT_STORAGE = os.environ.get('CONTACT_STORAGE', 'database')

    # Request Settings
    MAX_CONTENT_LENGTH = 64 * 1024  # 64KB is plenty for a contact message

    # JSON Settings
    JSON_AS_ASCII = False

    # Owner Notification Settings
    OWNER_TELEGRAM_BOT_TOKEN = os.environ.get('OWNER_TELEGRAM_BOT_TOKEN')
    OWNER_TELEGRAM_CHAT_ID = os.environ.get('OWNER_TELEGRAM_CHAT_ID')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    ENV_NAME = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # For in-memory SQLite during tests, keep engine options empty to avoid
    # passing invalid pool settings like pool_size to SQLite's StaticPool.
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CONTACT_STORAGE = 'database'
    OWNER_TELEGRAM_BOT_TOKEN = None
    OWNER_TELEGRAM_CHAT_ID = None


# Select configuration based on environment
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])


def validate_config(app_config):
    """
    Fail fast when required settings are missing

    Args:
        app_config (Mapping): The Flask app.config of the app being built

    Raises:
        ConfigurationError: If a required variable has no value
    """
    if app_config.get('TESTING'):
        return
    if not app_config.get('SQLALCHEMY_DATABASE_URI'):
        missing = ', '.join(REQUIRED_ENV_VARS)
        raise ConfigurationError(f"Missing required environment variable: {missing}")
    if app_config.get('CONTACT_STORAGE') not in ('database', 'memory'):
        raise ConfigurationError(
            f"CONTACT_STORAGE must be 'database' or 'memory', got {app_config.get('CONTACT_STORAGE')!r}")
