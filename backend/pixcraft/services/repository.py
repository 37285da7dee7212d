"""Firestore persistence for generation and upload records."""
import logging
from typing import Any, Optional

from google.cloud import firestore

logger = logging.getLogger(__name__)


class GenerationRepository:
    """Reads and writes documents in the `pixcraft` Firestore database.

    The client is created once at startup and shared by every request.
    """

    def __init__(
        self,
        client: Optional[firestore.Client] = None,
        project_id: Optional[str] = None,
        database: str = "pixcraft",
        generations_collection: str = "user_generations",
        images_collection: str = "images",
    ) -> None:
        self._db = client or firestore.Client(project=project_id, database=database)
        self.generations_collection = generations_collection
        self.images_collection = images_collection

    def find_generation(self, user_id: str, image_url: str) -> Optional[str]:
        """Return the id of the generation for this user and source image, if any."""
        query = (
            self._db.collection(self.generations_collection)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .where(filter=firestore.FieldFilter("originalImage.url", "==", image_url))
            .limit(1)
        )
        for snapshot in query.stream():
            return snapshot.id
        return None

    def create_generation(self, data: dict[str, Any]) -> str:
        """Insert a generation record and return its id."""
        payload = {
            **data,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        _, ref = self._db.collection(self.generations_collection).add(payload)
        logger.info("Created generation document %s", ref.id, extra={"generation_id": ref.id})
        return ref.id

    def update_generation(self, generation_id: str, data: dict[str, Any]) -> None:
        """Merge fields into an existing generation record."""
        payload = {**data, "updatedAt": firestore.SERVER_TIMESTAMP}
        self._db.collection(self.generations_collection).document(generation_id).update(payload)

    def complete_generation(self, generation_id: str, data: dict[str, Any]) -> None:
        """Write final results and stamp completedAt."""
        self.update_generation(generation_id, {**data, "completedAt": firestore.SERVER_TIMESTAMP})

    def record_upload(self, data: dict[str, Any]) -> str:
        """Insert an uploaded-original metadata record and return its id."""
        payload = {**data, "uploadedAt": firestore.SERVER_TIMESTAMP}
        _, ref = self._db.collection(self.images_collection).add(payload)
        return ref.id
