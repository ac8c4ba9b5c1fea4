"""
WSGI entrypoint: expose the Flask app as `app` so `horario_widget.main:app` works.
"""

from .flask_main import create_app

app = create_app()
