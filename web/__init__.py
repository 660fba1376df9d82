"""
Web application package for the chess rules kernel.

Provides a stateless FastAPI JSON API over board records, legal destinations,
move application, and FEN conversion.
"""
