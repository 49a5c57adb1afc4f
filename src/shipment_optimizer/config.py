"""Runtime settings from the environment; loads .env locally via python-dotenv."""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_SHIPPO_API_URL = "https://api.goshippo.com"


class OriginAddress(BaseModel):
    name: str = "Warehouse"
    address1: Optional[str] = None
    city: Optional[str] = None
    state: str = ""
    postal_code: Optional[str] = None
    country: str = "US"
    phone: str = "0000000000"


class Settings(BaseModel):
    rate_provider: str = Field(default="", description="'shippo' or 'static'; empty picks automatically")
    shippo_api_token: Optional[str] = None
    shippo_api_url: str = DEFAULT_SHIPPO_API_URL
    rate_timeout_seconds: float = Field(default=30.0, gt=0)
    origin: OriginAddress = Field(default_factory=OriginAddress)
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Build settings from environment variables (a local .env does not override them)."""
    load_dotenv()
    return Settings(
        rate_provider=os.getenv("RATE_PROVIDER", "").strip().lower(),
        shippo_api_token=os.getenv("SHIPPO_API_TOKEN") or None,
        shippo_api_url=os.getenv("SHIPPO_API_URL", DEFAULT_SHIPPO_API_URL),
        rate_timeout_seconds=float(os.getenv("RATE_TIMEOUT_SECONDS", "30")),
        origin=OriginAddress(
            name=os.getenv("ORIGIN_NAME", "Warehouse"),
            address1=os.getenv("ORIGIN_ADDRESS1"),
            city=os.getenv("ORIGIN_CITY"),
            state=os.getenv("ORIGIN_STATE", os.getenv("ORIGIN_PROVINCE", "")),
            postal_code=os.getenv("ORIGIN_POSTAL_CODE"),
            country=os.getenv("ORIGIN_COUNTRY", "US"),
            phone=os.getenv("ORIGIN_PHONE", "0000000000"),
        ),
        log_level=os.getenv("LOG_LEVEL", "WARNING").upper(),
    )
