"""
Runtime settings.
Values come from the environment (optionally a .env file) and only feed the
CLI defaults; explicit flags always win.
"""

import os
from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_DNS_BASE = "example.com"
DEFAULT_ENV = "myenv"


class Settings(BaseModel):
    dns_base: str = DEFAULT_DNS_BASE
    env: str = DEFAULT_ENV
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from CFMANIFEST_* variables."""
        if dotenv:
            # Load environment variables from .env file if it exists
            load_dotenv()
        return cls(
            dns_base=os.getenv("CFMANIFEST_DNS_BASE", DEFAULT_DNS_BASE),
            env=os.getenv("CFMANIFEST_ENV", DEFAULT_ENV),
            log_level=os.getenv("CFMANIFEST_LOG_LEVEL", "WARNING").upper(),
        )
