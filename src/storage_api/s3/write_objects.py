"""Functions for writing objects to an S3 bucket--the "C" and "U" in CRUD."""

from typing import BinaryIO, Optional, Union

import boto3
from mypy_boto3_s3 import S3Client

PUBLIC_READ_ACL = "public-read"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def upload_s3_object(
    bucket_name: str,
    object_key: str,
    file_content: Union[bytes, BinaryIO],
    content_type: Optional[str] = None,
    content_length: Optional[int] = None,
    acl: Optional[str] = PUBLIC_READ_ACL,
    s3_client: Optional[S3Client] = None,
) -> None:
    """
    Upload a file to an S3 bucket.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param file_content: The content of the file to upload, as bytes or a readable binary stream.
    :param content_type: The MIME type of the file, e.g. "text/plain" for a text file.
    :param content_length: Size of the content in bytes. Sent as object metadata when known.
    :param acl: Canned ACL applied to the new object. ``None`` leaves the bucket default.
    :param s3_client: An optional boto3 S3 client. If not provided, one will be created.
    """
    s3_client = s3_client or boto3.client("s3")
    put_kwargs = {
        "Bucket": bucket_name,
        "Key": object_key,
        "Body": file_content,
        "ContentType": content_type or DEFAULT_CONTENT_TYPE,
    }
    if content_length is not None:
        put_kwargs["ContentLength"] = content_length
    if acl:
        put_kwargs["ACL"] = acl
    s3_client.put_object(**put_kwargs)
