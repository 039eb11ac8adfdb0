# fertiliser_dashboard/modules/login/controller.py
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ...utils.auth import hash_password, needs_rehash, verify_password
from ...database.repositories.login_repo import LoginRepo

_log = logging.getLogger(__name__)

TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class LoginController:
    """
    Sign-in flow on top of LoginRepo.

    Public attrs (set after each prompt() / authenticate()):
      - last_error_code: str | None
      - last_error_message: str | None
      - last_username: str | None

    Error codes: cancelled, empty_fields, user_not_found, user_inactive,
    locked_out, wrong_password.
    """

    MAX_FAILED_ATTEMPTS = 5
    LOCKOUT_MINUTES = 15

    def __init__(
        self,
        conn: sqlite3.Connection,
        parent=None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.conn = conn
        self.parent = parent
        self.repo = LoginRepo(conn)
        self.clock = clock

        self.last_error_code: Optional[str] = None
        self.last_error_message: Optional[str] = None
        self.last_username: Optional[str] = None

    # ----------------------------- Public API -----------------------------

    def prompt(self, message: str | None = None) -> Optional[dict]:
        """
        Show the dialog and attempt login.
        Returns a user dict on success, None on failure or cancel.
        """
        from .form import LoginForm
        dlg = LoginForm(self.parent)
        if message:
            dlg.show_error(message)
        if self.last_username:
            dlg.username.setText(self.last_username)
        if not dlg.exec():
            self._reset_last_error()
            self._fail("cancelled", "Login cancelled by user.", log=False)
            return None
        username, password = dlg.get_values()
        return self.authenticate(username, password)

    def authenticate(self, username: str, password: str) -> Optional[dict]:
        self._reset_last_error()
        self.last_username = (username or "").strip()

        if not self.last_username or not password:
            self._fail("empty_fields", "Please enter both username and password.")
            return None

        u = self.repo.get_user_by_username(self.last_username)
        if not u:
            self._fail("user_not_found", f"No account exists for username “{self.last_username}”.", log=True)
            return None

        if not u["is_active"]:
            self._fail("user_inactive", f"Account “{self.last_username}” is inactive.", log=True)
            return None

        now = self.clock()
        locked_until = u.get("locked_until")
        if locked_until:
            if locked_until > now.strftime(TS_FORMAT):
                self._fail(
                    "locked_out",
                    f"Account is locked after repeated failures. Try again after {locked_until} UTC.",
                    log=True,
                )
                return None
            self.repo.clear_lock(int(u["user_id"]))

        if not verify_password(password, u["password_hash"]):
            lock_until = (now + timedelta(minutes=self.LOCKOUT_MINUTES)).strftime(TS_FORMAT)
            attempts = self.repo.increment_failed_attempts(
                int(u["user_id"]), self.MAX_FAILED_ATTEMPTS, lock_until
            )
            if attempts >= self.MAX_FAILED_ATTEMPTS:
                _log.warning("Locked %r after %d failed attempts", self.last_username, attempts)
            self._fail("wrong_password", f"Incorrect password for “{self.last_username}”.", log=True)
            return None

        if needs_rehash(u["password_hash"]):
            self.repo.update_password_hash(int(u["user_id"]), hash_password(password))
            _log.info("Upgraded password hash for %r", u["username"])

        self.repo.reset_failed_attempts_and_touch_login(int(u["user_id"]))
        self.repo.insert_auth_log(self.last_username, True, "ok")
        _log.info("User %r signed in", u["username"])
        return {
            "user_id": u["user_id"],
            "username": u["username"],
            "full_name": u.get("full_name"),
            "email": u.get("email"),
            "role": u.get("role"),
            "last_login": u.get("last_login"),
        }

    # ----------------------------- Internals -----------------------------

    def _reset_last_error(self) -> None:
        self.last_error_code = None
        self.last_error_message = None

    def _fail(self, code: str, message: str, log: bool = False) -> None:
        self.last_error_code = code
        self.last_error_message = message
        _log.info("Sign-in failed for %r: %s", self.last_username, code)
        if log:
            self.repo.insert_auth_log(self.last_username or "", False, code)
