"""
Application settings, read from the environment (and an optional ``.env``).
"""

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET_KEY = 'changeme'


class Config:
    """Settings used by the running service."""
    
    # Token signing secret, weak fallback is warned about by main.py
    SECRET_KEY = os.getenv('SECRET_KEY', DEFAULT_SECRET_KEY)
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False
    
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 3000))
    
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'geo')
    
    JWT_EXPIRATION_DAYS = int(os.getenv('JWT_EXPIRATION_DAYS', 7))
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 10))
    
    DEFAULT_PAGE_SIZE = int(os.getenv('DEFAULT_PAGE_SIZE', 100))
    MAX_PAGE_SIZE = int(os.getenv('MAX_PAGE_SIZE', 100))
    
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class TestingConfig(Config):
    """Settings for the test suite."""
    TESTING = True
    SECRET_KEY = 'test-secret'
    MONGO_DB_NAME = 'geo_test'
    # bcrypt's minimum cost
    BCRYPT_ROUNDS = 4
