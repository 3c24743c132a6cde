"""Package version."""

CLIENT_VERSION = "0.1.0"
