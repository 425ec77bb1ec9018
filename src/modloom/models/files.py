"""Pydantic models for mod files and multipart upload sessions."""

from pydantic import BaseModel

from .base import ModioModel


class FileHash(BaseModel):
    md5: str


class Download(BaseModel):
    """The signed download location of a file.

    Attributes:
        binary_url: Signed URL to the file contents.
        date_expires: Unix timestamp after which `binary_url` stops working.
    """

    binary_url: str
    date_expires: int = 0


class File(ModioModel):
    """A file uploaded to a mod.

    Attributes:
        id: Unique id of the file.
        mod_id: Unique id of the mod the file belongs to.
        date_added: Unix timestamp of the upload.
        virus_status: 0 not scanned, 1 scan complete, 2 in progress, 3 too large, 4 not found, 5 error.
        virus_positive: 1 if the scan flagged the file.
        filesize: Size of the file in bytes.
        filesize_uncompressed: Size of the extracted archive in bytes.
        filehash: Hashes of the file contents.
        filename: The file name as uploaded.
        version: Release version of the file.
        download: The signed download location.
    """

    id: int
    mod_id: int
    date_added: int = 0
    date_scanned: int = 0
    virus_status: int = 0
    virus_positive: int = 0
    virustotal_hash: str | None = None
    filesize: int
    filesize_uncompressed: int = 0
    filehash: FileHash
    filename: str
    version: str | None = None
    changelog: str | None = None
    metadata_blob: str | None = None
    download: Download


class UploadSession(ModioModel):
    """A server side multipart upload session.

    Attributes:
        upload_id: The id to pass to part, complete and delete requests.
        status: 0 incomplete, 1 pending, 2 processing, 3 completed, 4 cancelled.
    """

    upload_id: str
    status: int = 0


class UploadPart(ModioModel):
    upload_id: str
    part_number: int
    part_size: int
    date_added: int = 0
