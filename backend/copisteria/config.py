import os

APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))

# "sql" (SQLModel over DATABASE_URL) or "json" (single orders.json array)
ORDER_STORE = os.getenv("ORDER_STORE", "sql").lower()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///" + os.path.join(DATA_DIR, "orders.db"))
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")
ORDERS_FILE = os.getenv("ORDERS_FILE", os.path.join(DATA_DIR, "orders.json"))

UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(os.getcwd(), "uploads"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(200 * 1024 * 1024)))  # 200MB

PUBLIC_DIR = os.getenv("PUBLIC_DIR", os.path.join(os.getcwd(), "public"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

ORDER_WEBHOOK_URL = os.getenv("ORDER_WEBHOOK_URL", "")
ORDER_WEBHOOK_RETRIES = int(os.getenv("ORDER_WEBHOOK_RETRIES", "3"))
