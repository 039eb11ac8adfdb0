import logging

from ...utils.auth import hash_password

_log = logging.getLogger(__name__)


def seed(conn):
    # if no users exist, create admin/admin so the first sign-in works
    row = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()
    if row and row["n"] == 0:
        conn.execute("""
            INSERT INTO users(username, password_hash, full_name, email, role, is_active)
            VALUES (?, ?, ?, ?, ?, 1)
        """, ("admin", hash_password("admin"), "Administrator", "admin@example.com", "admin"))
        conn.commit()
        _log.info("Seeded default admin user")
