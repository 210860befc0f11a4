"""Tests for the create_user bootstrap script against an in-memory SQLite database."""

import io
import unittest
from contextlib import contextmanager, redirect_stderr
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import verify_password
from app.models import Base, User
from app.scripts import create_user


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        @contextmanager
        def sqlite_scope():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        patcher = patch.object(create_user, "session_scope", sqlite_scope)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> tuple[int, str]:
        stderr = io.StringIO()
        with patch("sys.argv", ["create_user", *argv]), redirect_stderr(stderr):
            code = create_user.main()
        return code, stderr.getvalue()

    def _users(self) -> list[User]:
        db = self.SessionLocal()
        try:
            return db.query(User).order_by(User.id).all()
        finally:
            db.close()

    def test_creates_admin(self) -> None:
        code, _ = self._run("root", "s3cret", "Admin", "--email", "root@example.com")
        self.assertEqual(code, 0)
        [user] = self._users()
        self.assertEqual(user.user_name, "root")
        self.assertEqual(user.role, "Admin")
        self.assertEqual(user.full_name, "root")
        self.assertEqual(user.email_id, "root@example.com")
        self.assertTrue(verify_password("s3cret", user.password_hash))

    def test_role_defaults_to_read_only(self) -> None:
        code, _ = self._run("viewer", "pw", "--full-name", "View Er")
        self.assertEqual(code, 0)
        [user] = self._users()
        self.assertEqual(user.role, "ReadOnly")
        self.assertEqual(user.full_name, "View Er")

    def test_duplicate_user_name_fails(self) -> None:
        self.assertEqual(self._run("root", "pw", "Admin")[0], 0)
        code, err = self._run("root", "other", "Admin")
        self.assertEqual(code, 1)
        self.assertIn("already taken", err)
        self.assertEqual(len(self._users()), 1)

    def test_blank_user_name_fails(self) -> None:
        code, err = self._run("   ", "pw")
        self.assertEqual(code, 1)
        self.assertIn("Invalid username length", err)
        self.assertEqual(self._users(), [])

    def test_unknown_role_is_rejected_by_argparse(self) -> None:
        with self.assertRaises(SystemExit):
            self._run("root", "pw", "Owner")


if __name__ == "__main__":
    unittest.main()
