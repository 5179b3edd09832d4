# backend/wsgi.py
from royalcare import create_app

app = create_app()
