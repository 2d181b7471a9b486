# backend/velvessa/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/velvessa.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///velvessa.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Simulated SMS gateway latency (seconds)
    SMS_DISPATCH_DELAY_SECONDS = float(os.environ.get("SMS_DISPATCH_DELAY_SECONDS", "1.0"))

    STORE_NAME = os.environ.get("STORE_NAME", "Velvessa Closet")
    CURRENCY_SYMBOL = "৳"
