import os
from dotenv import load_dotenv

# Load environment variables from .env file
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
dotenv_path = os.path.join(BASE_DIR, '.env')

# Load the .env file from that specific path
load_dotenv(dotenv_path=dotenv_path)


class Config:
    """Base configuration class."""

    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-fallback-secret-key-change-in-prod'

    # Relational store (users, roles, achievement mirror)
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///accolade.db')
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_recycle': 280}
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Document store (achievement records)
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017')
    MONGO_DB = os.getenv('MONGO_DB', 'accolade')
    MONGO_COLLECTION = 'achievements'

    # Upper bound for a single store operation, in seconds
    STORE_TIMEOUT_SECONDS = float(os.getenv('STORE_TIMEOUT_SECONDS', 5))

    # Bearer token lifetime, in seconds
    TOKEN_MAX_AGE = int(os.getenv('TOKEN_MAX_AGE', 60 * 60 * 24))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Role catalog seeded by `flask seed-roles`
    ADMIN_ROLE = 'admin'
    DEFAULT_ROLES = {
        'admin': 'Administrator with full user management access',
        'student': 'Student who records achievements',
        'lecturer': 'Lecturer who verifies submitted achievements',
    }

    USERS_PER_PAGE = 10
    MAX_USERS_PER_PAGE = 100
