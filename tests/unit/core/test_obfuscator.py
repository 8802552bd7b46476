"""
Tests for Obfuscator and Logger.obfuscate.
"""

import pytest

pytest.importorskip("cryptography")

from chainlog.core.exceptions import ConfigurationError, ObfuscationError  # noqa: E402
from chainlog.core.logger import Logger  # noqa: E402
from chainlog.core.obfuscator import MARKER, Obfuscator  # noqa: E402


@pytest.fixture
def obfuscator():
    return Obfuscator(b"0123456789abcdef0123456789abcdef")


class TestObfuscator:
    """Tests for AES-GCM obfuscation."""

    def test_round_trip(self, obfuscator):
        """unobfuscate() reverses obfuscate()."""
        token = obfuscator.obfuscate("4111-1111-1111-1111")
        assert token.startswith(MARKER + "{")
        assert "4111" not in token
        assert obfuscator.unobfuscate(token) == "4111-1111-1111-1111"

    def test_surrounding_text_is_kept(self, obfuscator):
        """Text around the obfuscated section survives."""
        line = "card=" + obfuscator.obfuscate("secret") + " end"
        assert obfuscator.unobfuscate(line) == "card=secret end"

    def test_random_nonce(self, obfuscator):
        """The same value obfuscates differently each time."""
        assert obfuscator.obfuscate("x") != obfuscator.obfuscate("x")

    def test_plain_text_unchanged(self, obfuscator):
        """Text without a marker is returned as is."""
        assert obfuscator.unobfuscate("plain") == "plain"

    def test_wrong_key(self, obfuscator):
        """Another key cannot decrypt."""
        token = obfuscator.obfuscate("secret")
        other = Obfuscator(Obfuscator.generate_key())
        with pytest.raises(ObfuscationError):
            other.unobfuscate(token)

    def test_truncated_payload(self, obfuscator):
        """Too short payloads are rejected."""
        with pytest.raises(ObfuscationError):
            obfuscator.unobfuscate(MARKER + "{AAAA}")

    @pytest.mark.parametrize("key", [b"short", "x" * 20])
    def test_key_size(self, key):
        """Keys must be 16, 24 or 32 bytes."""
        with pytest.raises(ConfigurationError):
            Obfuscator(key)

    def test_string_key(self):
        """String keys are UTF-8 encoded."""
        assert Obfuscator("k" * 16).obfuscate("v").startswith(MARKER)


class TestLoggerObfuscation:
    """Obfuscation through the logger."""

    def test_obfuscate_with_obfuscator(self, logger, obfuscator, read_records):
        """Derived loggers inherit the obfuscator."""
        log = logger.with_obfuscator(obfuscator).with_field("a", 1)
        token = log.obfuscate("secret")
        log.info("value %s", token)

        assert log.unobfuscate(token) == "secret"
        assert read_records()[0]["msg"].startswith("value " + MARKER)

    def test_create_with_obfuscator(self, memory_sink, obfuscator):
        """An Obfuscator passed to create() is used."""
        log = Logger.create("app", memory_sink, obfuscator)
        assert log.unobfuscate(log.obfuscate("v")) == "v"
