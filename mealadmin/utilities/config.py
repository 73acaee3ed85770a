"""Configuration management for the admin console."""
import os
from typing import Final, Tuple
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
BASE_DIR: Final[Path] = Path(__file__).parent.parent
_env_path = BASE_DIR / '.env'
if _env_path.exists():
    load_dotenv(_env_path)
else:
    load_dotenv()

# Record store
STORE_BACKEND: Final[str] = os.getenv('STORE_BACKEND', 'json').lower()
STORE_URL: Final[str] = os.getenv('STORE_URL', '')
STORE_API_KEY: Final[str] = os.getenv('STORE_API_KEY', '')
STORE_TIMEOUT: Final[float] = float(os.getenv('STORE_TIMEOUT', '10'))
DATA_DIR: Final[Path] = Path(os.getenv('DATA_DIR', str(BASE_DIR / 'data'))).resolve()

# Identifier allocation
ID_ALLOCATION_RETRIES: Final[int] = int(os.getenv('ID_ALLOCATION_RETRIES', '3'))

# List views
DEFAULT_ITEMS_PER_PAGE: Final[int] = int(os.getenv('DEFAULT_ITEMS_PER_PAGE', '10'))
ITEMS_PER_PAGE_OPTIONS: Final[Tuple[int, ...]] = tuple(
    int(v) for v in os.getenv('ITEMS_PER_PAGE_OPTIONS', '10,20,50,100').split(',') if v.strip()
)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()
