"""
Core business logic for relaying images.

This module is framework-agnostic - it doesn't import FastAPI, httpx,
or any infrastructure concerns. This separation means we can test the
signing and encoding logic in isolation and swap frameworks if needed.
"""
