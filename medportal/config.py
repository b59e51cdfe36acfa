import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Clinical gateway
GATEWAY_BASE_URL = os.getenv("GATEWAY_BASE_URL", "https://mcp.stellarone.health").rstrip("/")
GATEWAY_API_KEY = os.getenv("GATEWAY_API_KEY", "demo-key")
GATEWAY_CLIENT_ID = os.getenv("GATEWAY_CLIENT_ID", "medportal-backend")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10"))
GATEWAY_MAX_RETRIES = int(os.getenv("GATEWAY_MAX_RETRIES", "3"))
GATEWAY_BASE_DELAY_MS = int(os.getenv("GATEWAY_BASE_DELAY_MS", "1000"))
GATEWAY_MAX_DELAY_MS = int(os.getenv("GATEWAY_MAX_DELAY_MS", "5000"))

# One-time passwords issued in fallback mode
OTP_LENGTH = int(os.getenv("OTP_LENGTH", "6"))
OTP_EXPIRY_MINUTES = int(os.getenv("OTP_EXPIRY_MINUTES", "10"))
OTP_MAX_ATTEMPTS = int(os.getenv("OTP_MAX_ATTEMPTS", "3"))
# Abandoned verification records are swept after this; keep it above the expiry
OTP_RECORD_RETENTION_SECONDS = int(os.getenv("OTP_RECORD_RETENTION_SECONDS", "3600"))

# Bookings, triage sessions and appeals held locally while the gateway is down
FALLBACK_RECORD_TTL_SECONDS = int(os.getenv("FALLBACK_RECORD_TTL_SECONDS", "86400"))
FALLBACK_MAX_RECORDS = int(os.getenv("FALLBACK_MAX_RECORDS", "10000"))

# Twilio SMS delivery for fallback OTPs and reminders (demo mode when unset)
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")

BRAND_NAME = os.getenv("BRAND_NAME", "EasyMedPro")
MEETING_BASE_URL = os.getenv("MEETING_BASE_URL", "https://meet.easymedpro.com").rstrip("/")

# API protection
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))  # 15 minutes
REDIS_URL = os.getenv("REDIS_URL")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"
    ).split(",")
    if origin.strip()
]
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
