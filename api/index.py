"""
Serverless entry point for the Helpbox API
"""
import os

# Set environment variables for serverless
os.environ.setdefault("ENVIRONMENT", "production")
os.environ.setdefault("SESSION_COOKIE_SECURE", "true")

from mangum import Mangum
from helpbox.main import app

# Lambda handler for the ASGI app; lifespan opens the database pool
handler = Mangum(app, lifespan="auto")
