"""
Configuration Examples

Loggers built from LoggerConfig, environment variables and config files.
"""

import json
import os
import tempfile

from chainlog import ConfigFileLoader, Logger, LoggerConfig, create_logger, load_from_env


def from_config_object():
    """Explicit LoggerConfig."""
    print("\n=== LoggerConfig ===")

    config = LoggerConfig.create(
        name="billing",
        destination="stdout",
        level="INFO;DEBUG:{db}",
        converter="pino",
        redact_keys=["password"],
        fields={"region": "eu-west-1"},
    )
    log = create_logger(config)
    log.with_topic("db").debug("connected")
    log.with_field("password", "hunter2").info("login")


def from_environment():
    """LOG_* variables."""
    print("\n=== Environment ===")

    os.environ["LOG_DESTINATION"] = "stdout"
    os.environ["LOG_LEVEL"] = "WARN"
    os.environ["LOG_CONVERTER"] = "stackdriver"
    try:
        config = load_from_env(name="worker")
        print(f"Config: {config}")

        log = Logger.create("worker")
        log.info("not written")
        log.warn("queue is backing up")
    finally:
        for name in ("LOG_DESTINATION", "LOG_LEVEL", "LOG_CONVERTER"):
            os.environ.pop(name, None)


def from_file():
    """JSON config file."""
    print("\n=== Config File ===")

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "logging.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({
                "logger": {
                    "name": "api",
                    "destination": "stdout",
                    "level": "DEBUG",
                    "flush_interval": "1m",
                    "redact_patterns": [r"\b\d{16}\b"],
                }
            }, f)

        config = ConfigFileLoader.from_file(path)
        log = create_logger(config)
        log.debug("card 4111111111111111 charged")


if __name__ == "__main__":
    print("=" * 50)
    print("chainlog - Configuration Examples")
    print("=" * 50)

    from_config_object()
    from_environment()
    from_file()
