"""
WSGI entry point.

Usage:
    gunicorn wsgi:app
    flask --app wsgi init-sheets    # create missing worksheets
"""

from tracker import create_app

app = create_app()
