# backend/wsgi.py
from velvessa import create_app

app = create_app()
