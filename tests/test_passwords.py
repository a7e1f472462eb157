import pytest

from karen.auth.passwords import hash_password, verify_password


def test_hash_password_is_salted():
    first = hash_password("foobarbaz")
    second = hash_password("foobarbaz")

    assert first != second
    assert verify_password("foobarbaz", first)
    assert verify_password("foobarbaz", second)


def test_verify_password_rejects_wrong_password():
    encoded = hash_password("foobarbaz")
    assert verify_password("foobar", encoded) is False


def test_hash_records_iteration_count():
    encoded = hash_password("foobarbaz", iterations=1234)

    algorithm, iterations, _, _ = encoded.split("$")
    assert algorithm == "pbkdf2_sha256"
    assert iterations == "1234"
    assert verify_password("foobarbaz", encoded)


def test_verify_password_rejects_garbage():
    assert verify_password("foobarbaz", "") is False
    assert verify_password("foobarbaz", "md5$1$zz$zz") is False
    assert verify_password("foobarbaz", "pbkdf2_sha256$x$00$00") is False


def test_explicit_zero_iterations_is_not_replaced_by_default():
    with pytest.raises(ValueError):
        hash_password("foobarbaz", iterations=0)


def test_default_iterations_when_unspecified():
    from karen.auth.passwords import PASSWORD_HASH_ITERATIONS

    _, iterations, _, _ = hash_password("foobarbaz").split("$")
    assert int(iterations) == PASSWORD_HASH_ITERATIONS
