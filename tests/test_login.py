from datetime import datetime, timedelta

import pytest

from fertiliser_dashboard.modules.login.controller import LoginController
from fertiliser_dashboard.utils.auth import hash_password


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kw):
        self.now += timedelta(**kw)


@pytest.fixture()
def clock():
    return FakeClock(datetime(2024, 5, 1, 9, 0, 0))


@pytest.fixture()
def login(conn, clock):
    return LoginController(conn, clock=clock)


def _user(conn, username="admin"):
    return conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()


def test_default_admin_can_sign_in(login, conn):
    user = login.authenticate("admin", "admin")
    assert user["username"] == "admin"
    assert user["role"] == "admin"
    assert login.last_error_code is None
    assert _user(conn)["last_login"] is not None


@pytest.mark.parametrize(
    "username, password, code",
    [
        ("", "admin", "empty_fields"),
        ("admin", "", "empty_fields"),
        ("nobody", "x", "user_not_found"),
        ("admin", "wrong", "wrong_password"),
    ],
)
def test_failures_set_error_code(login, username, password, code):
    assert login.authenticate(username, password) is None
    assert login.last_error_code == code
    assert login.last_error_message


def test_inactive_user(login, conn):
    conn.execute("UPDATE users SET is_active = 0 WHERE username = 'admin'")
    conn.commit()
    assert login.authenticate("admin", "admin") is None
    assert login.last_error_code == "user_inactive"


def test_lockout_after_repeated_failures_then_expiry(login, conn, clock):
    for _ in range(LoginController.MAX_FAILED_ATTEMPTS):
        assert login.authenticate("admin", "nope") is None
    assert _user(conn)["locked_until"] == "2024-05-01 09:15:00"

    # the right password does not help while locked
    assert login.authenticate("admin", "admin") is None
    assert login.last_error_code == "locked_out"

    clock.advance(minutes=LoginController.LOCKOUT_MINUTES, seconds=1)
    assert login.authenticate("admin", "admin") is not None
    row = _user(conn)
    assert row["failed_attempts"] == 0
    assert row["locked_until"] is None


def test_success_resets_failed_attempts(login, conn):
    login.authenticate("admin", "nope")
    login.authenticate("admin", "nope")
    assert _user(conn)["failed_attempts"] == 2
    login.authenticate("admin", "admin")
    assert _user(conn)["failed_attempts"] == 0


def test_low_cost_hash_is_upgraded(login, conn):
    import bcrypt

    weak = bcrypt.hashpw(b"secret", bcrypt.gensalt(4)).decode()
    conn.execute("UPDATE users SET password_hash = ? WHERE username = 'admin'", (weak,))
    conn.commit()
    assert login.authenticate("admin", "secret") is not None
    stored = _user(conn)["password_hash"]
    assert stored != weak
    assert stored.startswith("$2b$12$")


def test_attempts_are_audited(login, conn):
    login.authenticate("admin", "nope")
    login.authenticate("ghost", "x")
    details = [r["details"] for r in conn.execute("SELECT details FROM audit_logs ORDER BY log_id")]
    assert "reason=wrong_password" in details[0]
    assert "username=ghost" in details[1]


def test_hash_password_rejects_empty():
    with pytest.raises(ValueError):
        hash_password("")
