"""
Contrib modules for chainlog.

Optional integrations; opentelemetry needs its extra installed.

Available contrib modules:
- standard_log: bridge from the standard logging module
- wsgi: per-request loggers for WSGI applications
- opentelemetry: trace/span ids on every record
"""
