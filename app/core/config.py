import os

def get_secret(secret_name: str) -> str | None:
    secret_path = f'/run/secrets/{secret_name}'
    try:
        with open(secret_path, 'r', encoding='utf-8') as secret_file:
            return secret_file.read().strip()
    except IOError:
        return os.getenv(secret_name)


SESSION_KEY_PEPPER = get_secret('session_key_pepper') or "dev-session-pepper"

GRAPHQL_URL = os.getenv("GRAPHQL_URL", "https://api.afterzin.com/graphql")
PAYMENTS_API_URL = os.getenv("PAYMENTS_API_URL", "https://api.afterzin.com/v1")
PAYMENT_PROVIDER = os.getenv("PAYMENT_PROVIDER", "pagarme").strip().lower()
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

if PAYMENT_PROVIDER not in {"pagarme", "stripe"}:
    raise ValueError(f"Unsupported PAYMENT_PROVIDER: {PAYMENT_PROVIDER}")

HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))
HTTP_MAX_CONNECTIONS = int(os.getenv("HTTP_MAX_CONNECTIONS", "50"))
GRAPHQL_QUERY_ATTEMPTS = 3

EVENTS_CACHE_TTL_SECONDS = int(os.getenv("EVENTS_CACHE_TTL_SECONDS", "30"))
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", "86400"))

PIX_POLL_INTERVAL_SECONDS = float(os.getenv("PIX_POLL_INTERVAL_SECONDS", "3"))
PIX_SUCCESS_DELAY_SECONDS = float(os.getenv("PIX_SUCCESS_DELAY_SECONDS", "1.5"))
PIX_SESSION_GRACE_SECONDS = int(os.getenv("PIX_SESSION_GRACE_SECONDS", "300"))
PIX_SESSION_MAX_LIFETIME_SECONDS = int(os.getenv("PIX_SESSION_MAX_LIFETIME_SECONDS", "3600"))

HOME_SECTION_SIZE = 8
SUGGESTIONS_MIN_QUERY = 2
SUGGESTIONS_MAX_RESULTS = 6
MAX_TICKETS_PER_SELECTION = 10

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
AUDIT_STREAM = os.getenv("AUDIT_STREAM", "audit:storefront")
AUDIT_STREAM_MAXLEN = int(os.getenv("AUDIT_STREAM_MAXLEN", "100000"))
