"""WSGI entrypoint.

Exports `app` (and `application`) for `gunicorn wsgi:app`.
"""
import os

from anonboard import create_app

app = create_app()
application = app

if __name__ == "__main__":
    app.run(host=os.environ.get("HOST", "0.0.0.0"), port=int(os.environ.get("PORT", "8000")))
