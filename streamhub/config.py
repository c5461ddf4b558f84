import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "production")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./streamhub.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "4320"))  # 3 days

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "*").split(",")
    if o.strip()
]

# OTP / SMS gateway
OTP_EXPIRY_MINUTES = int(os.getenv("OTP_EXPIRY_MINUTES", "5"))
SMS_GATEWAY_URL = os.getenv("SMS_GATEWAY_URL")
SMS_GATEWAY_API_KEY = os.getenv("SMS_GATEWAY_API_KEY")

# Uploads
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")  # local | s3
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "public", "uploads"))
UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads").rstrip("/")

THUMBNAIL_MAX_BYTES = int(os.getenv("THUMBNAIL_MAX_BYTES", str(5 * 1024 * 1024)))
THUMBNAIL_MAX_W = int(os.getenv("THUMBNAIL_MAX_W", "3840"))
THUMBNAIL_MAX_H = int(os.getenv("THUMBNAIL_MAX_H", "2160"))

AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY")
AWS_REGION = os.getenv("AWS_REGION")
AWS_BUCKET_NAME = os.getenv("AWS_BUCKET_NAME")

# Creator notifications
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
FROM_EMAIL = os.getenv("FROM_EMAIL", "noreply@streamhub.local")

# Simulated payment gateway
PAYMENT_SUCCESS_RATE = float(os.getenv("PAYMENT_SUCCESS_RATE", "0.9"))
PAYMENT_DELAY_SECONDS = float(os.getenv("PAYMENT_DELAY_SECONDS", "2"))

# Rate limits (slowapi syntax)
OTP_RATE_LIMIT = os.getenv("OTP_RATE_LIMIT", "5/minute")
LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")
PAYMENT_RATE_LIMIT = os.getenv("PAYMENT_RATE_LIMIT", "10/minute")
