"""
Device-locked OTP subscription gateway for telecom provider APIs.
"""
__version__ = "1.0.0"
