"""Initialize the Firestore collections used by the backend.

This is a one-shot standalone script, independent of the FastAPI server.
Run it once per new project: Firestore creates a collection lazily on the
first write, so a placeholder document is added to each collection and then
deleted.

Usage:
    # from the project root
    python scripts/init_firestore.py
    python scripts/init_firestore.py --keep   # leave the placeholder docs
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

# Put backend/ on the path when run standalone
_BACKEND_PATH = Path(__file__).parent.parent / "backend"
if str(_BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(_BACKEND_PATH))

from google.cloud import firestore

from pixcraft.core.config import Settings, get_settings


def collection_names(settings: Settings) -> list[str]:
    """Collections the backend writes to."""
    return [
        settings.images_collection,
        settings.generations_collection,
        settings.users_collection,
    ]


def init_collections(keep: bool = False, client: Optional[Any] = None) -> list[str]:
    """Create each collection with a placeholder document.

    Args:
        keep: When True the placeholder documents are not deleted.
        client: Firestore client; one is created from settings when omitted.

    Returns:
        Names of the initialized collections.
    """
    settings = get_settings()
    db = client or firestore.Client(
        project=settings.gcp_project_id,
        database=settings.firestore_database,
    )

    names = collection_names(settings)
    for name in names:
        _, ref = db.collection(name).add(
            {"_initialized": True, "createdAt": firestore.SERVER_TIMESTAMP}
        )
        print(f"Collection '{name}' initialized with doc ID: {ref.id}")
        if not keep:
            ref.delete()
            print(f"Placeholder document deleted from '{name}'")
    return names


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Create the Firestore collections used by the PixCraft backend."
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep the placeholder documents instead of deleting them.",
    )
    args = parser.parse_args()
    init_collections(keep=args.keep)
