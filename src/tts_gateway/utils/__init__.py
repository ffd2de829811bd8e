"""
Utility Modules for tts-gateway.

    - text.py: Log-safe text previews
    - timeit.py: Performance measurement utilities
"""
