import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
BASE_DIR = Path(__file__).resolve().parent.parent
DOTENV_PATH = BASE_DIR / ".env"
ENV_LOADED = load_dotenv(DOTENV_PATH)

APP_VERSION = "20250621-1019"
DEFAULT_PORT = 8080

# Placeholders reported when a fact cannot be determined
UNKNOWN = "-unknown-"
NOT_AVAILABLE = "-not available-"
UNAVAILABLE = "-unavailable-"

# Metadata server (only reachable inside Cloud Run)
METADATA_URL = "http://metadata.google.internal/computeMetadata/v1/instance/service-accounts/default/email"
METADATA_HEADERS = {"Metadata-Flavor": "Google"}
METADATA_TIMEOUT_SECONDS = float(os.getenv("METADATA_TIMEOUT_SECONDS", 3))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def is_hosted() -> bool:
    return bool(os.getenv("K_SERVICE")) and bool(os.getenv("K_REVISION"))


@dataclass(frozen=True)
class AppConfig:
    version: str
    port: int
    k_service: str
    k_revision: str
    hosted: bool
    service_account: str


def load_config() -> AppConfig:
    """
    Snapshot the process configuration. Resolves the service identity, which
    may hit the network when hosted, so call it once before binding the port.
    """
    # metadata_service imports this module
    from status_service.services.metadata_service import resolve_service_identity

    return AppConfig(
        version=APP_VERSION,
        port=int(os.getenv("PORT") or DEFAULT_PORT),
        k_service=os.getenv("K_SERVICE") or UNKNOWN,
        k_revision=os.getenv("K_REVISION") or UNKNOWN,
        hosted=is_hosted(),
        service_account=resolve_service_identity(),
    )
