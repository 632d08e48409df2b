from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Viewer page that receives the payload as its `data` query parameter.
    viewer_base_url: str = "http://localhost:8000/emergency"

    # Optical-code error correction: L (~7%), M (~15%), Q (~25%), H (~30%) damage tolerance.
    # Higher levels leave less room for the payload.
    qr_error_correction: Literal["L", "M", "Q", "H"] = "H"

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
