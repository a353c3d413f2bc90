import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    host: str = os.getenv("DOCSTORE_HOST", "0.0.0.0")
    port: int = int(os.getenv("DOCSTORE_PORT", "8085"))
    # comma separated, "*" allows any origin
    cors_origins: str = os.getenv("DOCSTORE_CORS_ORIGINS", "*")


settings = Settings()
