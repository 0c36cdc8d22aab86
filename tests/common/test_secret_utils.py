import string

import pytest

from common.secret_utils import SecretGenerator, generate_secret


@pytest.mark.parametrize("byte_length", [1, 16, 32, 64])
def test_generate_secret_is_hex_of_twice_the_length(byte_length):
    secret = generate_secret(byte_length)

    assert len(secret) == 2 * byte_length
    assert set(secret) <= set(string.hexdigits.lower())


def test_generate_secret_default_length():
    assert len(generate_secret()) == 64


def test_generate_secret_calls_are_distinct():
    assert len({generate_secret(32) for _ in range(20)}) == 20


@pytest.mark.parametrize("byte_length", [0, -1])
def test_generate_secret_rejects_non_positive_length(byte_length):
    with pytest.raises(ValueError):
        generate_secret(byte_length)


def test_secret_generator_is_callable():
    generator = SecretGenerator(8)

    first, second = generator(), generator()

    assert len(first) == len(second) == 16
    assert first != second


def test_secret_generator_rejects_zero_length():
    with pytest.raises(ValueError):
        SecretGenerator(0)
