"""Task repository backed by a Firestore collection."""

import asyncio
import logging
from typing import Any

from google.cloud import firestore

from portal_contabilidad.data.models import Task, task_from_document, task_to_document
from portal_contabilidad.data.subscription import Subscription

logger = logging.getLogger(__name__)


class FirestoreTaskRepository:
    """Task repository over the Firestore `tasks` collection.

    Live subscriptions use snapshot listeners, which call back on the SDK's
    watch thread. Mutations run the blocking SDK calls in a worker thread.
    """

    def __init__(self, client: firestore.Client, collection: str = "tasks") -> None:
        """Initialize repository.

        Args:
            client: Firestore client
            collection: Name of the task collection
        """
        self._client = client
        self._collection_name = collection
        self._collection = client.collection(collection)

    def subscribe_all(self) -> Subscription[list[Task]]:
        """Subscribe to every document in the collection.

        Returns:
            Subscription delivering the full task list on every change
        """
        subscription: Subscription[list[Task]] = Subscription(self._collection_name)

        def on_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            try:
                tasks = [task_from_document(doc.id, doc.to_dict()) for doc in docs]
            except Exception as e:
                subscription.fail(e)
                return
            logger.debug(f"[FirestoreTaskRepository] {len(tasks)} tasks delivered")
            subscription.push(tasks)

        watch = self._collection.on_snapshot(on_snapshot)
        subscription.set_release(watch.unsubscribe)
        logger.info(f"[FirestoreTaskRepository] Listening to collection '{self._collection_name}'")
        return subscription

    def subscribe_one(self, task_id: str) -> Subscription[Task | None]:
        """Subscribe to one document.

        Args:
            task_id: Document key

        Returns:
            Subscription delivering the task, or None while it does not exist
        """
        subscription: Subscription[Task | None] = Subscription(
            f"{self._collection_name}/{task_id}"
        )

        def on_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            doc = docs[0] if docs else None
            if doc is None or not doc.exists:
                subscription.push(None)
                return
            try:
                subscription.push(task_from_document(doc.id, doc.to_dict()))
            except Exception as e:
                subscription.fail(e)

        watch = self._collection.document(task_id).on_snapshot(on_snapshot)
        subscription.set_release(watch.unsubscribe)
        logger.info(f"[FirestoreTaskRepository] Listening to task '{task_id}'")
        return subscription

    async def add(self, task: Task) -> str:
        """Create a task document.

        A pre-assigned task id becomes the document key; otherwise Firestore
        assigns one.

        Args:
            task: Task to store

        Returns:
            Identity of the stored task
        """
        document = task_to_document(task)
        if task.id:
            await asyncio.to_thread(self._collection.document(task.id).set, document)
            task_id = task.id
        else:
            _, ref = await asyncio.to_thread(self._collection.add, document)
            task_id = ref.id
        logger.info(f"[FirestoreTaskRepository] Added task {task_id}")
        return task_id

    async def update(self, task: Task) -> None:
        """Replace a task document by identity.

        Args:
            task: Task with the new field values
        """
        if not task.id.strip():
            return
        await asyncio.to_thread(self._collection.document(task.id).set, task_to_document(task))
        logger.info(f"[FirestoreTaskRepository] Updated task {task.id}")

    async def delete(self, task_id: str) -> None:
        """Delete a task document by identity.

        Args:
            task_id: Document key
        """
        if not task_id.strip():
            return
        await asyncio.to_thread(self._collection.document(task_id).delete)
        logger.info(f"[FirestoreTaskRepository] Deleted task {task_id}")

    def close(self) -> None:
        """Close the Firestore client."""
        self._client.close()
