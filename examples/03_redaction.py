"""
Redaction and Obfuscation Examples

Pattern redaction, key redaction, self-redacting values and reversible
obfuscation (needs: pip install chainlog[crypto]).
"""

from chainlog import Logger, Obfuscator, StdoutSink, redact_with_hash
from chainlog.utils.sanitizer import SENSITIVE_KEYS, default_redactors


class Email:
    """Value that knows how to hide itself."""

    def __init__(self, address: str):
        self.address = address

    def redact(self) -> str:
        return redact_with_hash(self.address)


def pattern_redaction():
    print("\n=== Pattern Redaction ===")

    log = Logger.create("shop", StdoutSink()).with_redactor(*default_redactors())
    log.with_field("order", "1234 5678 9012 3456").info("processing order")
    log.info("calling upstream with api_key=abc123")


def key_redaction():
    print("\n=== Key Redaction ===")

    log = Logger.create("shop", StdoutSink()).with_keys_to_redact(*SENSITIVE_KEYS)
    log.with_fields(user="alice", password="hunter2", headers={"Authorization": "Bearer x"}).info("login")


def self_redaction():
    print("\n=== Self Redaction ===")

    log = Logger.create("shop", StdoutSink())
    log.with_field("email", Email("alice@example.com")).info("newsletter sent")


def obfuscation():
    print("\n=== Obfuscation ===")

    obfuscator = Obfuscator(Obfuscator.generate_key())
    log = Logger.create("shop", StdoutSink(), obfuscator)

    token = log.obfuscate("4111-1111-1111-1111")
    log.info("charged card %s", token)
    print(f"Recovered: {log.unobfuscate(token)}")


if __name__ == "__main__":
    print("=" * 50)
    print("chainlog - Redaction Examples")
    print("=" * 50)

    pattern_redaction()
    key_redaction()
    self_redaction()
    try:
        obfuscation()
    except ImportError as e:
        print(f"Skipped: {e}")
