"""
Main Application Entry Point

PDF render service: POST a complete HTML document, receive a PDF.
Run with `uvicorn main:app`.
"""

from core.app_factory import create_app

app = create_app()
