"""
Image Relay - forwards uploaded images to a Google Cloud Storage bucket.

This package contains the complete application:
- core: Framework-agnostic relay logic (signing, multipart encoding, orchestration)
- infrastructure: Google OAuth and Cloud Storage integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
