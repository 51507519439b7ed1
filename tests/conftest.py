import os
import tempfile

# Keep log files out of the working tree; must happen before geo_api is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="geo_api_logs_"))

import mongomock
import pytest
from bson.objectid import ObjectId

from geo_api import create_app
from geo_api.config import TestingConfig
from geo_api.services.credential_service import initialize_credential_service
from geo_api.services.user_service import initialize_user_service


@pytest.fixture
def mongo_client():
    client = mongomock.MongoClient()
    yield client
    client.close()


@pytest.fixture
def user_service(mongo_client):
    return initialize_user_service(None, TestingConfig.MONGO_DB_NAME, client=mongo_client)


@pytest.fixture
def credential_service():
    return initialize_credential_service(
        TestingConfig.SECRET_KEY,
        TestingConfig.JWT_EXPIRATION_DAYS,
        TestingConfig.BCRYPT_ROUNDS,
    )


@pytest.fixture
def app(user_service, credential_service):
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(user_service, credential_service):
    def _make_user(username, password="secret123"):
        return user_service.create_user(username, credential_service.hash_password(password))

    return _make_user


@pytest.fixture
def add_guesses(user_service):
    def _add_guesses(user_id, scores):
        user_service.guesses_collection.insert_many(
            [{"user_id": ObjectId(user_id), "score": score} for score in scores]
        )

    return _add_guesses


@pytest.fixture
def auth_headers(credential_service, make_user):
    user = make_user("admin")
    token = credential_service.issue_token(user.id)
    return {"Authorization": f"Bearer {token}"}
