# backend/studyquiz/__init__.py
"""Study Quiz: AI-generated quizzes from pasted study material."""

__version__ = "0.1.0"
