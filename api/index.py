"""
Vercel entrypoint for the Flask app.
Expose the Flask WSGI app as `app` for @vercel/python.
"""

from horario_widget.main import app  # noqa: F401  Vercel detects `app` symbol
