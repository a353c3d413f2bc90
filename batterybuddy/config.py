import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    store_url: str = os.getenv("BATTERYBUDDY_STORE_URL", "http://127.0.0.1:8085")
    timeout: float = float(os.getenv("BATTERYBUDDY_TIMEOUT", "10"))

    # Shared collection so every anonymous session sees the same stock
    collection_path: str = os.getenv(
        "BATTERYBUDDY_COLLECTION",
        "artifacts/battery_buddy_v2/public/data/batteries"
    )
    categories_doc: str = os.getenv("BATTERYBUDDY_CATEGORIES_DOC", "config/battery_types")

    log_level: str = os.getenv("BATTERYBUDDY_LOG_LEVEL", "INFO").upper()


settings = Settings()
