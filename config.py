# config.py


class Config:
    DEBUG = False
    TESTING = False
    SHEETS_CACHE_TTL = 15                   # seconds a fetched range is reused


class ProductionConfig(Config):
    pass


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
