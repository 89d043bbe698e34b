from typing import Literal

from pydantic import BaseModel, ConfigDict
import os

class Settings(BaseModel):
    # env defaults are checked too, a bad level fails at import instead of on first render
    model_config = ConfigDict(validate_default=True)

    # QR symbol: error correction level, pixels per module, quiet zone in modules
    error_correction: Literal["L", "M", "Q", "H"] = os.getenv("WIFIQR_ERROR_CORRECTION", "M").upper()
    box_size: int = int(os.getenv("WIFIQR_BOX_SIZE", "8"))
    border: int = int(os.getenv("WIFIQR_BORDER", "4"))

    # Output
    image_format: Literal["png", "jpeg", "qoi"] = os.getenv("WIFIQR_IMAGE_FORMAT", "png").lower()
    output_dir: str = os.getenv("WIFIQR_OUTPUT_DIR", ".")

    log_level: str = os.getenv("WIFIQR_LOG_LEVEL", "WARNING")

settings = Settings()
