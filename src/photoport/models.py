# data models shared by importers
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar

import yaml
from pydantic import BaseModel, ConfigDict, Field


class PhotoAlbum(BaseModel):
    """An album as captured by the exporting service."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Source-side album id, stable across retries")
    name: str = Field(description="Album display name")
    description: str | None = Field(default=None, description="Optional album description")


class PhotosContainerResource(BaseModel):
    """Previously exported photos data handed to an importer."""

    model_config = ConfigDict(frozen=True)

    albums: list[PhotoAlbum] = Field(default_factory=list)


class TokensAndUrlAuthData(BaseModel):
    """Credentials for one job. Owned by the host, never persisted here."""

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(min_length=1)
    refresh_token: str | None = None
    token_server_url: str | None = None


class ResultType(Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import_item call."""

    result_type: ResultType
    cause: BaseException | None = None

    OK: ClassVar["ImportResult"]

    @classmethod
    def error(cls, cause: BaseException) -> "ImportResult":
        return cls(ResultType.ERROR, cause)

    @property
    def ok(self) -> bool:
        return self.result_type is ResultType.OK


ImportResult.OK = ImportResult(ResultType.OK)


def load_photos_container(path: Path | str) -> PhotosContainerResource:
    """
    Load an exported photos bundle from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the bundle doesn't exist
        ValueError: If the bundle can't be parsed or doesn't describe a photos container
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Resource bundle not found: {path}")

    with open(path) as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid resource bundle {path}: {e}") from e

    return PhotosContainerResource.model_validate(data)
