"""
Basic chainlog Usage Examples

Demonstrates root loggers, derived loggers, levels and errors.
"""

from chainlog import Level, Logger, StdoutSink


def basic_logging():
    """Root logger writing to stdout."""
    print("\n=== Basic Logging ===")

    log = Logger.create("shop", StdoutSink())
    log.info("service started")
    log.warn("disk at %d%%", 91)
    log.debug("not written, the default level is INFO")


def derived_loggers():
    """Fields added by derived loggers."""
    print("\n=== Derived Loggers ===")

    log = Logger.create("shop", StdoutSink())
    request = log.with_fields("request_id", "r-42", user="alice")
    request.info("loading cart")

    # The nearest field wins
    request.with_field("user", "bob").info("impersonating")


def topics_and_scopes():
    """Per-topic levels."""
    print("\n=== Topics and Scopes ===")

    log = Logger.create("shop", StdoutSink())
    log.set_filter_level(Level.DEBUG, "db")

    db = log.with_child("db", "query", "table", "orders")
    db.debug("select %d rows", 3)
    log.with_topic("http").debug("not written")


def errors():
    """Exceptions as the last argument."""
    print("\n=== Errors ===")

    log = Logger.create("shop", StdoutSink())
    try:
        raise ConnectionError("gateway down")
    except ConnectionError as e:
        log.error("payment failed for order %s", "o-7", e)


def timing():
    """Durations of calls and blocks."""
    print("\n=== Timing ===")

    log = Logger.create("shop", StdoutSink())
    total = log.time_func("sum invoices", sum, [10, 20, 30])
    print(f"Total: {total}")

    with log.timer("rebuild index"):
        sorted(range(10000), reverse=True)


if __name__ == "__main__":
    print("=" * 50)
    print("chainlog - Basic Usage Examples")
    print("=" * 50)

    basic_logging()
    derived_loggers()
    topics_and_scopes()
    errors()
    timing()

    print("\n" + "=" * 50)
    print("All examples completed!")
    print("=" * 50)
