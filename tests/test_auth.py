import bcrypt

from fertiliser_dashboard.utils.auth import hash_password, needs_rehash, verify_password


def test_hash_and_verify():
    h = hash_password("s3cret")
    assert verify_password("s3cret", h)
    assert verify_password("s3cret", h.encode())
    assert not verify_password("other", h)


def test_unknown_schemes_never_match():
    assert not verify_password("x", "plain-text")
    assert not verify_password("x", None)
    assert not verify_password("x", "$2b$12$broken")


def test_needs_rehash():
    assert not needs_rehash(hash_password("x"))
    assert needs_rehash(bcrypt.hashpw(b"x", bcrypt.gensalt(4)))
    assert needs_rehash("pbkdf2_sha256$1$abc$def")
