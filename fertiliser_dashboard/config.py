import os
from pathlib import Path

from .constants import DATA_DIR, DATA_DIR_ENV, DB_FILE_NAME, IMAGES_DIR, REPORTS_DIR

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = Path(os.environ.get(DATA_DIR_ENV) or (BASE_DIR / DATA_DIR))
DB_PATH = DATA_PATH / DB_FILE_NAME
IMAGES_PATH = DATA_PATH / IMAGES_DIR
REPORTS_PATH = DATA_PATH / REPORTS_DIR

# ensure data dir exists early
DATA_PATH.mkdir(parents=True, exist_ok=True)
