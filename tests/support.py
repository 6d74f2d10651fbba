import unittest

from fastapi.testclient import TestClient

from app import app
from core.database import SessionLocal, engine
from models.base import Base
from utils.permission_manager import PermissionManager
from utils import role_cache
from utils.role_cache import get_role_cache
from utils.user_manager import UserManager
from utils.whitelist_manager import WhitelistManager

ADMIN_EMAIL = "admin@example.com"
PASSWORD = "correct-horse-battery"


class DatabaseTestCase(unittest.TestCase):
    """Fresh schema and seeded permissions for every test."""

    def setUp(self):
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        # Fresh cache singleton so hit/request counters don't leak between tests
        role_cache._global_cache = None
        get_role_cache().invalidate()
        self.db = SessionLocal()
        PermissionManager(self.db).seed_default_permissions()

    def tearDown(self):
        self.db.close()


class ApiTestCase(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.client = TestClient(app)

    def whitelist(self, value):
        WhitelistManager(self.db, get_role_cache()).add_entry(value)

    def create_user(self, email, role="user", status="active", password=PASSWORD):
        return UserManager(self.db).create_user(
            email=email, password=password, role=role, status=status
        )

    def login(self, email, password=PASSWORD):
        response = self.client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        self.assertEqual(response.status_code, 200, response.text)
        # Drop the cookie so each request authenticates with its own header
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}

    def register_admin(self):
        response = self.client.post(
            "/api/auth/register", json={"email": ADMIN_EMAIL, "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 201, response.text)
        return self.login(ADMIN_EMAIL)
