from __future__ import annotations

import sqlite3
from typing import Optional


class LoginRepo:
    """
    Data access for the sign-in dialog.

    Works against:
      users(user_id, username, password_hash, full_name, email, role,
            is_active, last_login, failed_attempts, locked_until)
      audit_logs(user_id, action_type, table_name, details, ip_address)

    Password checks happen in the controller (bcrypt); this layer only
    reads the stored hash and keeps the lockout counters.

    Lock timestamps are written by the caller as 'YYYY-MM-DD HH:MM:SS'
    (UTC) so the application clock is the only clock involved.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    @staticmethod
    def _norm_username(username: str) -> str:
        return (username or "").strip()

    # ------------------------------- reads -------------------------------

    def get_user_by_username(self, username: str) -> Optional[dict]:
        row = self.conn.execute(
            """
            SELECT user_id, username, password_hash, full_name, email, role,
                   is_active, last_login, failed_attempts, locked_until
            FROM users
            WHERE username = ?
            """,
            (self._norm_username(username),),
        ).fetchone()
        return dict(row) if row else None

    # ------------------------------ writes -------------------------------

    def increment_failed_attempts(self, user_id: int, max_attempts: int, lock_until_ts: str) -> int:
        """
        Bump failed_attempts; once it reaches max_attempts, set locked_until.
        Returns the new attempt count.
        """
        if max_attempts < 1:
            max_attempts = 5
        self.conn.execute(
            """
            UPDATE users
               SET failed_attempts = failed_attempts + 1,
                   locked_until = CASE
                       WHEN (failed_attempts + 1) >= ? THEN ?
                       ELSE locked_until
                   END
             WHERE user_id = ?
            """,
            (max_attempts, lock_until_ts, user_id),
        )
        self.conn.commit()
        row = self.conn.execute(
            "SELECT failed_attempts FROM users WHERE user_id = ?", (user_id,)
        ).fetchone()
        return int(row["failed_attempts"]) if row else 0

    def clear_lock(self, user_id: int) -> None:
        """An expired lock starts a fresh window of attempts."""
        self.conn.execute(
            "UPDATE users SET failed_attempts = 0, locked_until = NULL WHERE user_id = ?",
            (user_id,),
        )
        self.conn.commit()

    def reset_failed_attempts_and_touch_login(self, user_id: int) -> None:
        self.conn.execute(
            """
            UPDATE users
               SET failed_attempts = 0,
                   last_login = CURRENT_TIMESTAMP,
                   locked_until = NULL
             WHERE user_id = ?
            """,
            (user_id,),
        )
        self.conn.commit()

    def update_password_hash(self, user_id: int, new_hash: str) -> None:
        """Used to upgrade hashes stored with a lower bcrypt cost."""
        self.conn.execute(
            "UPDATE users SET password_hash = ? WHERE user_id = ?", (new_hash, user_id)
        )
        self.conn.commit()

    def insert_auth_log(self, username: str, success: bool, reason: str, client: Optional[str] = None) -> None:
        """Record the attempt in audit_logs; user_id is NULL for unknown usernames."""
        uname = self._norm_username(username)
        row = self.conn.execute(
            "SELECT user_id FROM users WHERE username = ?", (uname,)
        ).fetchone()
        user_id = int(row["user_id"]) if row else None
        details = f"success={1 if success else 0}; reason={reason or ''}; username={uname}"
        self.conn.execute(
            """
            INSERT INTO audit_logs (user_id, action_type, table_name, record_id, details, ip_address)
            VALUES (?, 'auth', 'users', NULL, ?, ?)
            """,
            (user_id, details, client),
        )
        self.conn.commit()
