from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.db import session_scope
from app.core.logging import configure_logging
from app.core.storage import get_image_storage
from app.services import reset_catalog


def main() -> None:
    configure_logging()
    with session_scope() as db:
        reset_catalog(db, get_image_storage())


if __name__ == "__main__":
    main()
