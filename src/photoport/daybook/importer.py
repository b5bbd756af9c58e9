# Daybook photos importer
import logging
from typing import Any

import requests

from photoport.executor import IdempotentImportExecutor
from photoport.models import ImportResult, PhotoAlbum, PhotosContainerResource, TokensAndUrlAuthData

logger = logging.getLogger(__name__)


class DaybookPhotosImporter:
    """Imports albums to Daybook."""

    def __init__(
        self,
        session: requests.Session,
        job_store: Any,
        base_url: str,
        timeout: float = 30.0,
    ):
        self.session = session
        self.job_store = job_store
        self.base_url = base_url
        self.timeout = timeout

        logger.debug(f"Entered daybook auth: {base_url}")

    def import_item(
        self,
        job_id,
        executor: IdempotentImportExecutor,
        auth_data: TokensAndUrlAuthData,
        resource: PhotosContainerResource | None,
    ) -> ImportResult:
        """
        Create every album in resource on Daybook.

        Each album goes through the executor keyed by its source id, so albums
        created by an earlier attempt of the same job are not created again.
        A failing album is recorded by the executor and does not stop the
        rest; the result is OK either way.
        """
        if resource is None:
            # Nothing to import
            return ImportResult.OK

        for album in resource.albums:
            executor.execute_and_swallow_io_exceptions(
                album.id, album.name, lambda album=album: self.create_album(album, auth_data)
            )

        return ImportResult.OK

    def create_album(self, album: PhotoAlbum, auth_data: TokensAndUrlAuthData) -> str:
        """
        POST one album and return the id Daybook assigned to it.

        Raises:
            ValueError: On a non-2xx status or an empty response body
            IOError: If the response doesn't carry the new album id
            requests.RequestException: On transport failures
        """
        form = {"title": album.name}
        if album.description:
            form["description"] = album.description

        r = self.session.post(
            self.base_url,
            headers={"Authorization": f"Bearer {auth_data.access_token}"},
            data=form,
            timeout=self.timeout,
        )
        code = r.status_code
        if not 200 <= code <= 299:
            raise ValueError(
                f"Error occurred in request for {self.base_url}, code: {code}, message: {r.reason}"
            )
        if not r.content:
            raise ValueError("Didn't get response body!")

        try:
            response_data = r.json()
        except ValueError as e:
            raise IOError(f"Couldn't parse album creation response: {e}") from e

        data = response_data.get("data") if isinstance(response_data, dict) else None
        new_album_id = data.get("id") if isinstance(data, dict) else None
        if not new_album_id:
            raise IOError("Didn't receive new album id")

        logger.info(f"Created album {album.name!r} ({album.id}) -> {new_album_id}")
        return str(new_album_id)
