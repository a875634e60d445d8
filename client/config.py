# client/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

SERVER_BASE_URL = os.getenv("STOREFRONT_API_URL", "http://localhost:5000").rstrip("/")
API_BASE_URL = f"{SERVER_BASE_URL}/api"

HTTP_TIMEOUT = float(os.getenv("STOREFRONT_HTTP_TIMEOUT", "10"))

STORAGE_PATH = Path(os.getenv("STOREFRONT_STORAGE_PATH", Path.home() / ".storefront" / "local_storage.json"))
