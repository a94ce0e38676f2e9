"""
Google OAuth integration.

Exchanges signed service-account assertions for access tokens.
"""

from .token import GoogleTokenExchanger

__all__ = ["GoogleTokenExchanger"]
