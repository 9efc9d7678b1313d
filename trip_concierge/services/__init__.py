"""
Services built on top of the conversation engine.
"""

from trip_concierge.services.session_service import SessionService

__all__ = ["SessionService"]
