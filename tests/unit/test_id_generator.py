"""Unit tests for the ID generator utilities."""

import string

from podgate.utils.id_generator import generate_nanoid, generate_request_id


FULL_ALPHABET = string.ascii_letters + string.digits + "_-"


class TestGenerateNanoid:
    """Tests for the generate_nanoid function."""

    def test_default_length_is_21(self):
        assert len(generate_nanoid()) == 21

    def test_custom_length(self):
        for length in [5, 10, 50]:
            assert len(generate_nanoid(length)) == length

    def test_alphabet(self):
        assert set(generate_nanoid(200)) <= set(FULL_ALPHABET)


class TestGenerateRequestId:
    """Tests for generate_request_id."""

    def test_unique(self):
        ids = [generate_request_id() for _ in range(10)]
        assert len(set(ids)) == 10
