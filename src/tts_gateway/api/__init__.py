"""
FastAPI REST API Layer for tts-gateway.

    - routes.py: GET / (synthesis), /health, /metrics
    - schemas.py: SynthesisQuery validation model
    - dependencies.py: FastAPI dependency injection
"""
