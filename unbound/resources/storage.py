"""
Unbound Python SDK - Storage Resource

This module provides methods for uploading and managing stored files.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Union

from unbound.config import Endpoints
from unbound.exceptions import MissingRequiredParameterError
from unbound.http_fallback import serialize_query
from unbound.multipart import FilePart, MultipartBody, MultipartEncoder
from unbound.resources.base import BaseResource

STORAGE_ID_SCHEMA = {"storageId": {"type": "string", "required": True}}


def _coerce_files(files: Any) -> List[FilePart]:
    # A (filename, content) tuple is one file, any other list or tuple is many
    if (
        isinstance(files, tuple)
        and len(files) in (2, 3)
        and isinstance(files[0], str)
        and not isinstance(files[1], (str, FilePart))
    ):
        return [FilePart.coerce(files)]
    if isinstance(files, (list, tuple)):
        return [FilePart.coerce(item) for item in files]
    return [FilePart.coerce(files)]


class StorageResource(BaseResource):
    """
    Resource for file storage.

    Example:
        >>> await client.storage.upload_files(["./invoice.pdf"], classification="invoice")
        >>> files = await client.storage.list_files(limit=20)
    """

    async def upload_files(
        self,
        files: Union[MultipartBody, FilePart, Iterable[Any], Any],
        classification: Optional[str] = None,
        expire_after: Optional[Union[int, str]] = None,
        is_public: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Upload one or more files.

        Args:
            files: A pre-encoded MultipartBody, or one or more files in any
                shape ``FilePart.coerce`` accepts
            classification: Storage classification
            expire_after: Expiry for the stored files
            is_public: Make the files publicly readable
            metadata: Arbitrary metadata, sent as JSON

        Returns:
            Upload result
        """
        if files is None:
            raise MissingRequiredParameterError("files")

        if isinstance(files, MultipartBody):
            body = files
        else:
            parts = _coerce_files(files)
            if not parts:
                raise MissingRequiredParameterError("files")

            encoder = MultipartEncoder(environment=self._client.environment)
            for part in parts:
                encoder.add_file(part)
            if classification:
                encoder.add_field("classification", classification)
            if expire_after:
                encoder.add_field("expireAfter", expire_after)
            if is_public is not None:
                encoder.add_field("isPublic", is_public)
            if metadata:
                encoder.add_field("metadata", metadata)
            body = encoder.encode()

        return await self._post(Endpoints.STORAGE_UPLOAD, body)

    async def get_file(self, storage_id: str, download: bool = False) -> Any:
        """Fetch a stored file; ``download`` asks for the attachment form."""
        self._validate(
            {"storageId": storage_id, "download": download},
            {**STORAGE_ID_SCHEMA, "download": {"type": "boolean", "required": False}},
        )
        query = {"download": "true"} if download else None
        return await self._get(Endpoints.STORAGE_FILE.format(storage_id=storage_id), query)

    def get_file_url(self, storage_id: str, download: bool = False) -> str:
        """Build the direct URL of a stored file without making a request."""
        self._validate(
            {"storageId": storage_id, "download": download},
            {**STORAGE_ID_SCHEMA, "download": {"type": "boolean", "required": False}},
        )
        url = self._client.base_url + Endpoints.STORAGE_FILE.format(storage_id=storage_id)
        if download:
            url += "?" + serialize_query({"download": "true"})
        return url

    async def delete_file(self, storage_id: str) -> Any:
        self._validate({"storageId": storage_id}, STORAGE_ID_SCHEMA)
        return await self._delete(Endpoints.STORAGE_FILE.format(storage_id=storage_id))

    async def get_file_info(self, storage_id: str) -> Any:
        self._validate({"storageId": storage_id}, STORAGE_ID_SCHEMA)
        return await self._get(Endpoints.STORAGE_FILE_INFO.format(storage_id=storage_id))

    async def update_file_metadata(self, storage_id: str, metadata: Dict[str, Any]) -> Any:
        """Replace the metadata of a stored file."""
        self._validate(
            {"storageId": storage_id, "metadata": metadata},
            {**STORAGE_ID_SCHEMA, "metadata": {"type": "object", "required": True}},
        )
        return await self._put(
            Endpoints.STORAGE_FILE_METADATA.format(storage_id=storage_id),
            {"metadata": metadata},
        )

    async def list_files(
        self,
        classification: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None,
    ) -> Any:
        """
        List stored files.

        Args:
            classification: Only files with this classification
            limit: Page size
            offset: Page offset
            order_by: Sort field
            order_direction: ``asc`` or ``desc``
        """
        query = self._compact(
            classification=classification,
            limit=limit,
            offset=offset,
            orderBy=order_by,
            orderDirection=order_direction,
        )
        self._validate(
            query,
            {
                "classification": {"type": "string"},
                "limit": {"type": "number"},
                "offset": {"type": "number"},
                "orderBy": {"type": "string"},
                "orderDirection": {"type": "string"},
            },
        )
        return await self._get(Endpoints.STORAGE_FILES, query or None)

    async def get_storage_classifications(self) -> Any:
        return await self._get(Endpoints.STORAGE_CLASSIFICATIONS)
