import datetime
import unittest

import jwt
import mongomock
from werkzeug.security import generate_password_hash

from stormcloud import create_app
from stormcloud.core.constants import DOCUMENTS, ENVIRONMENTS, MATCHES, USERS
from stormcloud.store import DocumentStore

TEST_ENVIRONMENT = "test"
TEST_SECRET = "stormcloud-test-secret-key-for-signing"  # nosec
TEST_PASSWORD = "Password123!"  # nosec
TEST_DBNAME = "stormcloud_test"


class BaseTestCase(unittest.TestCase):
    """Runs the app against an in-memory MongoDB seeded with one environment."""

    def setUp(self):
        self.app = create_app(
            {
                "TESTING": True,
                "SECRET_KEY": TEST_SECRET,
                "JWT_SECRET_KEY": TEST_SECRET,
                "MONGO_DBNAME": TEST_DBNAME,
                "STORMCLOUD_ENVIRONMENT": TEST_ENVIRONMENT,
            }
        )
        self.mongo = mongomock.MongoClient()
        self.app.extensions["mongo_client"] = self.mongo
        self.db = self.mongo[TEST_DBNAME]
        self.store = DocumentStore(self.db)
        self.client = self.app.test_client()
        self.environment = self.create_environment()

    def create_environment(self, friendly_id=TEST_ENVIRONMENT, settings=None):
        """Creates an environment record and returns it."""
        environment = {
            "friendlyId": friendly_id,
            "settings": settings or {},
            "masterPasswordHash": None,
        }
        result = self.db[ENVIRONMENTS].insert_one(dict(environment))
        environment["_id"] = str(result.inserted_id)
        return environment

    def create_user(self, username="scout", permissions=(), password=TEST_PASSWORD):
        """Creates a user granted ``permissions`` in the test environment."""
        self.db[USERS].insert_one(
            {
                "_id": username,
                "permissions": {TEST_ENVIRONMENT: [str(p) for p in permissions]},
                "passwordHash": generate_password_hash(password),
            }
        )
        return username

    def token_for(self, username, expires_in=3600, secret=TEST_SECRET):
        """Signs a token for ``username``."""
        now = datetime.datetime.now(datetime.timezone.utc)
        return jwt.encode(
            {"sub": username, "exp": now + datetime.timedelta(seconds=expires_in)},
            secret,
            algorithm="HS256",
        )

    def login_as(self, *permissions, username="scout"):
        """Creates a user with ``permissions`` and sends its token as a cookie."""
        self.create_user(username, permissions)
        self.client.set_cookie("token", self.token_for(username))
        return username

    def create_match(self, match_number=1, competition="2024txcmp", documents=None):
        """Creates a match in the test environment and returns its id."""
        result = self.db[MATCHES].insert_one(
            {
                "environment": TEST_ENVIRONMENT,
                "competition": competition,
                "matchNumber": match_number,
                "teams": [],
                "locked": False,
                "documents": list(documents or []),
                "date": None,
            }
        )
        return str(result.inserted_id)

    def create_document(self, data_type="match", json_data="{}", image=None):
        """Creates a document in the test environment and returns its id."""
        document = {
            "environment": TEST_ENVIRONMENT,
            "dataType": data_type,
            "json": json_data,
            "datetime": datetime.datetime(2024, 3, 1, tzinfo=datetime.timezone.utc),
        }
        if image is not None:
            document["image"] = image
        result = self.db[DOCUMENTS].insert_one(document)
        return str(result.inserted_id)

    def get_match(self, match_id):
        return self.store.get_doc(MATCHES, {"_id": match_id})
