"""
Test configuration. Settings are read at import time, so the environment is
prepared before any chalkboard module is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "chalkboard-test-secret-0123456789abcdef"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["SMTP_HOST"] = ""
