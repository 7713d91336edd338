# -*- coding: utf-8 -*-
import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.environ.get(
        "CORS_ALLOWED_ORIGINS",
        "https://landivo.com,https://www.landivo.com,http://localhost:5173,http://localhost:3000"
    )
    DB_AUTOCREATE = os.getenv("LANDIVO_DB_AUTOCREATE", "false").lower() == "true"
    DB_MIGRATE_ON_START = os.getenv("LANDIVO_DB_MIGRATE_ON_START", "true").lower() == "true"
