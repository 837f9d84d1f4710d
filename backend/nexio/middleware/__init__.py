"""
Nexio Backend — Middleware Package
===================================

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit: rejects over-limit clients before any other work
    2. Request ID: sets the correlation ID used by logs and error bodies
    3. Logging:    one access line with status and duration
"""
