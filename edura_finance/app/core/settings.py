import os


class Settings:
    def __init__(self):
        self.app_name = os.getenv("EDURA_APP_NAME", "Edura Finance")
        self.api_version = "1.0.0"
        self.environment = os.getenv("EDURA_ENVIRONMENT", "development")
        self.secret_key = os.getenv("EDURA_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = int(os.getenv("EDURA_ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.manager_secret_key = os.getenv("EDURA_MANAGER_SECRET_KEY", "")
        self.database_url = os.getenv("EDURA_DATABASE_URL", "sqlite:///./edura_finance.db")
        self.log_level = os.getenv("EDURA_LOG_LEVEL", "INFO")
        self.currency = os.getenv("EDURA_CURRENCY", "VND")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
