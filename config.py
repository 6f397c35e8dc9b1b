import os

# Storage
DATA_DIR = os.getenv("DATA_DIR", "data")

# JWT Config
SECRET_KEY = os.getenv("JWT_SECRET", "dev-secret-change")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days

# Accounts registered with one of these emails get the admin role
ADMIN_EMAILS = [e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "admin@ir7.com").split(",") if e.strip()]
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

# Shipping (Taka)
FREE_SHIPPING_THRESHOLD = int(os.getenv("FREE_SHIPPING_THRESHOLD", 3000))
FLAT_SHIPPING_FEE = int(os.getenv("FLAT_SHIPPING_FEE", 110))

# Client
STORE_API_URL = os.getenv("STORE_API_URL", "http://localhost:8000")
GUEST_EMAIL_DOMAIN = "ir7.com"
