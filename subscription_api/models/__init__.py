"""
Models package
"""
from .user_session import UserSession
from .subscriber_identity import SubscriberIdentity

__all__ = ["UserSession", "SubscriberIdentity"]
