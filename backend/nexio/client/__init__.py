"""
Nexio Client SDK
================

Async Python client for the Nexio API, mirroring the mobile app's data layer:

    SessionStore  persisted login state and onboarding flag (JSON file)
    ApiClient     request helper that attaches the caller identity
    QueryCache    cached GETs keyed by tuples, with prefix invalidation
    NexioClient   login/signup/logout plus mutations that invalidate the
                  same cache keys the app screens do
    display       reputation levels, notification icons/targets, start route
"""

from nexio.client.api import ApiClient, ApiError
from nexio.client.cache import QueryCache
from nexio.client.nexio_client import NexioClient
from nexio.client.session import SessionStore

__all__ = ["ApiClient", "ApiError", "NexioClient", "QueryCache", "SessionStore"]
