"""
Core Infrastructure for tts-gateway.

    - config.py: Settings loading, validated config, shared-secret provider
    - logging/: Structured logging with numeric levels
    - metrics.py: Prometheus metrics collection
"""
