"""
Paint Matcher Configuration
Manages environment variables and defaults for extraction, matching and storage.
"""
import os
from pathlib import Path
from typing import Optional


DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "paint_catalog.json"


class Config:
    """Configuration class for the paint matcher service."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("PAINTMATCH_MAX_FILE_MB", "10"))

    # Logging
    LOG_LEVEL: str = os.environ.get("PAINTMATCH_LOG_LEVEL", "INFO")
    LOG_JSON: bool = os.environ.get("PAINTMATCH_LOG_JSON", "false").lower() == "true"

    # Quantization defaults
    PALETTE_SIZE: int = int(os.environ.get("PAINTMATCH_PALETTE_SIZE", "5"))
    MAX_SAMPLES: int = int(os.environ.get("PAINTMATCH_MAX_SAMPLES", "20000"))
    RNG_SEED: int = int(os.environ.get("PAINTMATCH_RNG_SEED", "42"))

    # Matching defaults
    MAX_MATCHES: int = int(os.environ.get("PAINTMATCH_MAX_MATCHES", "3"))
    MATCH_WORKERS: int = int(os.environ.get("PAINTMATCH_MATCH_WORKERS", "1"))

    # Catalog source
    CATALOG_PATH: str = os.environ.get("PAINTMATCH_CATALOG_PATH", str(DEFAULT_CATALOG_PATH))

    # Result store
    STORE_MAX_SIZE: int = int(os.environ.get("PAINTMATCH_STORE_MAX_SIZE", "1000"))
    STORE_TTL: int = int(os.environ.get("PAINTMATCH_STORE_TTL", "86400"))  # 1 day

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PAINTMATCH_ALLOWED_ORIGINS", "http://localhost:3000")

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png"]
    SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png"}

    @classmethod
    def max_file_bytes(cls) -> int:
        """Upload size limit in bytes."""
        return cls.MAX_FILE_MB * 1024 * 1024

    @classmethod
    def validate_palette_size(cls, palette_size: int) -> bool:
        """Validate quantizer palette size."""
        return 1 <= palette_size <= 10

    @classmethod
    def allowed_origins(cls) -> Optional[list]:
        """Parse comma-separated CORS origins."""
        origins = [o.strip() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]
        return origins or None


# Global config instance
config = Config()
