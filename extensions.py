"""
Extensions Module - Centralized initialization of Flask extensions
Decouples extensions from the application factory to avoid circular imports
and enable better testing.
"""

from flask_sqlalchemy import SQLAlchemy

# Initialize extensions without binding to app
db = SQLAlchemy()

__all__ = ['db']
