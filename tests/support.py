import os
import tempfile
import unittest

from board.errors import NotFoundError, StorageError
from board.extensions.blob_store import EXTENSION_NAME, BlobInfo


TEST_JWT_SECRET = "test-secret-key-long-enough-for-hs256"


class FakeBlobStore:
    def __init__(self, fail=False):
        self.fail = fail
        self.objects = {}
        self.put_calls = []

    def put(self, key, data, mime_type):
        self.put_calls.append(key)
        if self.fail:
            raise StorageError("Upload failed")
        self.objects[key] = (data, mime_type)
        return {"url": self.url_for(key)}

    def url_for(self, key):
        return f"https://blobs.test/board/{key}"

    def stat(self, key):
        if key not in self.objects:
            raise NotFoundError("Stored file not found")
        data, mime_type = self.objects[key]
        return BlobInfo(size=len(data), content_type=mime_type)

    def close(self):
        pass


class BoardTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from board import create_app
        from board.db import db
        from board.services import auth_service

        cls.app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": TEST_JWT_SECRET,
        })
        cls.client = cls.app.test_client()
        cls.db = db
        cls.auth_service = auth_service

    @classmethod
    def tearDownClass(cls):
        from board import close_app

        close_app(cls.app)
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()
        self.app.config["POST_DELETE_OWNER_ONLY"] = False
        self.app.config["IDENTITY_CALLBACK_SECRET"] = ""
        self.blob_store = FakeBlobStore()
        self.app.extensions[EXTENSION_NAME] = self.blob_store

    def _sign_in(self, open_id, name=None):
        with self.app.app_context():
            return self.auth_service.sign_in(open_id, name=name or open_id)

    def _auth_header(self, open_id, name=None):
        token = self._sign_in(open_id, name)["access_token"]
        return {"Authorization": f"Bearer {token}"}

    def _refresh_header(self, open_id, name=None):
        token = self._sign_in(open_id, name)["refresh_token"]
        return {"Authorization": f"Bearer {token}"}
