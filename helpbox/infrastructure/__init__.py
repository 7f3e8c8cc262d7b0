"""
Infrastructure Layer
=====================

Technical adapters shared by the bounded contexts:
- Database: async SQLAlchemy engine and sessions
- LLM: upstream text generation clients
"""
