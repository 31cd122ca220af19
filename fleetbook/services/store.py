"""Document store client for the FleetBook JSON server."""

import logging
from typing import Any, Dict, List
from uuid import uuid4

import requests

from fleetbook import config
from fleetbook.core.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)


def _url(*parts: str) -> str:
    return "/".join([config.STORE_URL] + [str(p) for p in parts])


class DocumentStore:
    """
    Thin wrapper around the JSON document server.

    Every failure (connection errors, non-2xx responses) surfaces as
    StorageError. Nothing is retried here; callers decide.
    """

    @staticmethod
    def get(collection: str, record_id: str) -> Dict[str, Any]:
        """
        Read a single record.

        Raises:
            NotFoundError: If no record has this id
            StorageError: If the read fails
        """
        try:
            response = requests.get(_url(collection, record_id), timeout=config.REQUEST_TIMEOUT)

            if response.status_code == 404:
                raise NotFoundError(f"No {collection} record with ID {record_id}")

            response.raise_for_status()
            return response.json()

        except requests.RequestException as e:
            raise StorageError(f"Failed to read {collection}/{record_id}: {str(e)}")

    @staticmethod
    def list(collection: str) -> List[Dict[str, Any]]:
        """Read every record of a collection."""
        try:
            response = requests.get(_url(collection), timeout=config.REQUEST_TIMEOUT)

            if response.status_code == 404:
                # Collection not created yet
                return []

            response.raise_for_status()
            return response.json() or []

        except requests.RequestException as e:
            raise StorageError(f"Failed to read {collection}: {str(e)}")

    @staticmethod
    def query(collection: str, **filters: Any) -> List[Dict[str, Any]]:
        """
        Read the records matching every filter.

        Filters compare by equality; a ``_gte``, ``_gt``, ``_lte`` or ``_lt``
        suffix on the field name selects a range comparison instead.
        Booleans are sent the way the server stores them.
        """
        params = {
            key: ("true" if value else "false") if isinstance(value, bool) else value
            for key, value in filters.items()
        }
        try:
            response = requests.get(_url(collection, "query"), params=params,
                                    timeout=config.REQUEST_TIMEOUT)

            if response.status_code == 404:
                return []

            response.raise_for_status()
            return response.json() or []

        except requests.RequestException as e:
            raise StorageError(f"Failed to query {collection}: {str(e)}")

    @staticmethod
    def snapshot(collection: str) -> Dict[str, Dict[str, Any]]:
        """Full current content of a collection as an id -> record mapping."""
        return {str(record["id"]): record for record in DocumentStore.list(collection) if record.get("id")}

    @staticmethod
    def create(collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Create a record, assigning an id when it has none."""
        new_record = dict(record)
        new_record.setdefault("id", str(uuid4()))
        try:
            response = requests.post(_url(collection), json=new_record, timeout=config.REQUEST_TIMEOUT)
            response.raise_for_status()
            logger.info(f"Created {collection}/{new_record['id']}")
            saved = response.json()
            # Fall back to what we sent if the server echoes back a partial body
            return saved if isinstance(saved, dict) and saved.get("id") else new_record

        except requests.RequestException as e:
            raise StorageError(f"Failed to create {collection} record: {str(e)}")

    @staticmethod
    def update(collection: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Write the given fields onto an existing record and return the merged record."""
        try:
            response = requests.patch(_url(collection, record_id), json=fields,
                                      timeout=config.REQUEST_TIMEOUT)

            if response.status_code == 404:
                raise NotFoundError(f"No {collection} record with ID {record_id}")

            response.raise_for_status()
            logger.info(f"Updated {collection}/{record_id}: {', '.join(sorted(fields))}")
            return response.json()

        except requests.RequestException as e:
            raise StorageError(f"Failed to update {collection}/{record_id}: {str(e)}")

    @staticmethod
    def delete(collection: str, record_id: str) -> None:
        try:
            response = requests.delete(_url(collection, record_id), timeout=config.REQUEST_TIMEOUT)

            if response.status_code == 404:
                raise NotFoundError(f"No {collection} record with ID {record_id}")

            response.raise_for_status()
            logger.info(f"Deleted {collection}/{record_id}")

        except requests.RequestException as e:
            raise StorageError(f"Failed to delete {collection}/{record_id}: {str(e)}")
