"""
Storage gateway: every interaction with the S3 bucket goes through here.

Callers only ever see public object URLs. Keys are derived from URLs by
stripping the bucket's base URL, and any URL outside the bucket is rejected
before the backend is contacted.
"""
import logging
import re
import uuid
from dataclasses import dataclass
from typing import BinaryIO, Iterable, List, Optional
from urllib.parse import quote, unquote

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_s3 import S3Client
from pydantic import BaseModel, ConfigDict

from storage_api.errors import BackendError, InvalidUrlError, NotFoundError, UploadError
from storage_api.s3.delete_objects import delete_s3_object
from storage_api.s3.read_objects import (
    DEFAULT_MAX_KEYS,
    fetch_s3_object_bytes,
    fetch_s3_objects_metadata,
    fetch_s3_objects_using_page_token,
    is_not_found_error,
)
from storage_api.s3.write_objects import PUBLIC_READ_ACL, upload_s3_object
from storage_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

WHITESPACE_RUN = re.compile(r"\s+")


class BucketConfig(BaseModel):
    """Immutable description of the one bucket a gateway serves."""

    bucket_name: str
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    public_base_url: Optional[str] = None
    list_page_size: int = DEFAULT_MAX_KEYS

    model_config = ConfigDict(frozen=True)

    @property
    def base_url(self) -> str:
        """The URL of the empty key; every object URL starts with it."""
        if self.public_base_url:
            return self.public_base_url.rstrip("/") + "/"
        if self.endpoint_url:
            # path-style addressing, the way moto and most S3-compatible servers expose objects
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/"


@dataclass
class UploadRequest:
    """One file to upload, as received from a multipart request part."""

    filename: str
    content_type: Optional[str]
    length: Optional[int]
    stream: BinaryIO


def sanitize_filename(filename: str) -> str:
    """Replace every run of whitespace with a single underscore."""
    return WHITESPACE_RUN.sub("_", filename)


def generate_unique_key(filename: Optional[str]) -> str:
    """Build ``<uuid4>_<sanitized filename>`` so repeated filenames never collide."""
    return f"{uuid.uuid4()}_{sanitize_filename(filename or '')}"


class StorageGateway:
    """Save, load, delete and list the objects of a single S3 bucket by public URL.

    The gateway holds no per-request state; one instance is shared by all requests.
    Batch operations run sequentially and stop at the first failure without undoing
    the items that already succeeded.
    """

    def __init__(self, config: BucketConfig, s3_client: S3Client):
        self.config = config
        self.s3_client = s3_client

    @property
    def bucket_name(self) -> str:
        return self.config.bucket_name

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def object_url(self, object_key: str) -> str:
        return self.base_url + quote(object_key, safe="/")

    def extract_object_key(self, url: str) -> str:
        """Resolve a public URL back to its object key.

        :raises InvalidUrlError: if ``url`` does not start with the bucket's base URL or is
            the bare base URL.
        """
        base_url = self.base_url
        # the base URL itself names no object
        if not url.startswith(base_url) or len(url) == len(base_url):
            raise InvalidUrlError(
                f"URL does not belong to bucket {self.bucket_name}: {url}",
                operation="extract_object_key",
                target=url,
            )
        return unquote(url[len(base_url):])

    def save(
        self,
        filename: Optional[str],
        content_type: Optional[str],
        length: Optional[int],
        stream: BinaryIO,
    ) -> str:
        """
        Upload a stream as a new public-read object and return its URL.

        The stream is closed before this returns, whether the upload worked or not.

        :param filename: Original filename; whitespace runs become underscores in the key.
        :param content_type: MIME type stored as object metadata.
        :param length: Content length in bytes stored as object metadata, if known.
        :param stream: Readable binary stream with the file content.
        :raises UploadError: if the stream cannot be read or S3 rejects the write.
        """
        object_key = generate_unique_key(filename)
        try:
            upload_s3_object(
                bucket_name=self.bucket_name,
                object_key=object_key,
                file_content=stream,
                content_type=content_type,
                content_length=length,
                acl=PUBLIC_READ_ACL,
                s3_client=self.s3_client,
            )
        except (BotoCoreError, ClientError, OSError, ValueError) as err:
            logger.error(f"Failed to upload {filename!r} as {object_key}: {err}")
            raise UploadError(
                f"Failed to save file: {filename}",
                operation="save",
                target=filename,
            ) from err
        finally:
            stream.close()

        logger.info(f"Uploaded {filename!r} to s3://{self.bucket_name}/{object_key}")
        return self.object_url(object_key)

    @log_execution_time
    def save_many(self, uploads: Iterable[UploadRequest]) -> List[str]:
        """Save each upload in order; the returned URLs line up 1:1 with the input.

        If one upload fails, the streams of the uploads after it are closed unread.
        """
        uploads = list(uploads)
        urls = []
        try:
            for upload in uploads:
                urls.append(self.save(upload.filename, upload.content_type, upload.length, upload.stream))
        finally:
            for upload in uploads[len(urls):]:
                upload.stream.close()
        return urls

    def load(self, url: str) -> bytes:
        """
        Read the full content of the object behind ``url`` into memory.

        :raises InvalidUrlError: if the URL is outside the bucket.
        :raises NotFoundError: if the object does not exist.
        :raises BackendError: if the read fails for any other reason.
        """
        object_key = self.extract_object_key(url)
        try:
            content = fetch_s3_object_bytes(self.bucket_name, object_key, s3_client=self.s3_client)
        except ClientError as err:
            if is_not_found_error(err):
                raise NotFoundError(f"File not found: {url}", operation="load", target=url) from err
            logger.error(f"Failed to load {object_key}: {err}")
            raise BackendError(f"Failed to load file: {url}", operation="load", target=url) from err
        except (BotoCoreError, OSError) as err:
            logger.error(f"Failed to load {object_key}: {err}")
            raise BackendError(f"Failed to load file: {url}", operation="load", target=url) from err

        logger.debug(f"Loaded {len(content)} bytes from s3://{self.bucket_name}/{object_key}")
        return content

    def delete(self, url: str) -> None:
        """Delete the object behind ``url``. Deleting a missing object is not an error."""
        object_key = self.extract_object_key(url)
        try:
            delete_s3_object(self.bucket_name, object_key, s3_client=self.s3_client)
        except (BotoCoreError, ClientError) as err:
            logger.error(f"Failed to delete {object_key}: {err}")
            raise BackendError(f"Failed to delete file: {url}", operation="delete", target=url) from err
        logger.info(f"Deleted s3://{self.bucket_name}/{object_key}")

    @log_execution_time
    def delete_many(self, urls: Iterable[str]) -> None:
        """Delete each URL in order, stopping at the first failure."""
        for url in urls:
            self.delete(url)

    @log_execution_time
    def list(self, prefix: Optional[str] = None) -> List[str]:
        """
        Return the URLs of every object whose key starts with ``prefix``.

        Pages are followed until S3 stops returning a continuation token. URLs come
        back in S3's listing order.

        :param prefix: Key prefix acting as a folder. ``None`` or ``""`` lists the whole bucket.
        :raises BackendError: if any listing call fails.
        """
        prefix = prefix or ""
        page_size = self.config.list_page_size
        try:
            files, next_page_token = fetch_s3_objects_metadata(
                self.bucket_name, prefix=prefix, max_keys=page_size, s3_client=self.s3_client
            )
            urls = [self.object_url(obj["Key"]) for obj in files]
            pages = 1
            while next_page_token:
                logger.debug(f"Listed page {pages} of {prefix!r} with {len(files)} objects")
                files, next_page_token = fetch_s3_objects_using_page_token(
                    self.bucket_name,
                    continuation_token=next_page_token,
                    prefix=prefix,
                    max_keys=page_size,
                    s3_client=self.s3_client,
                )
                urls.extend(self.object_url(obj["Key"]) for obj in files)
                pages += 1
        except (BotoCoreError, ClientError) as err:
            logger.error(f"Failed to list objects under {prefix!r}: {err}")
            raise BackendError(f"Failed to list files under: {prefix}", operation="list", target=prefix) from err

        logger.info(f"Listed {len(urls)} objects under {prefix!r} in {pages} page(s)")
        return urls
