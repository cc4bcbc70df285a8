"""wirefetch: configurable outbound HTTP(S) requests with retries."""

__version__ = "0.1.0"
