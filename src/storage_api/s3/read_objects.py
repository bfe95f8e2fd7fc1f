"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import List, Optional, Tuple

import boto3
from botocore.exceptions import ClientError
from mypy_boto3_s3 import S3Client
from mypy_boto3_s3.type_defs import GetObjectOutputTypeDef, ObjectTypeDef

DEFAULT_MAX_KEYS = 1000
NOT_FOUND_ERROR_CODES = ("404", "NoSuchKey", "NotFound")


def is_not_found_error(err: ClientError) -> bool:
    """Whether a botocore ``ClientError`` means the object or key does not exist."""
    code = (err.response.get("Error") or {}).get("Code")
    return code in NOT_FOUND_ERROR_CODES


def fetch_s3_object(
    bucket_name: str,
    object_key: str,
    s3_client: Optional[S3Client] = None,
) -> GetObjectOutputTypeDef:
    """
    Fetch an object from the S3 bucket.

    The caller owns the returned ``Body`` stream and must close it.

    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the object to fetch.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: The ``get_object`` response, including the ``Body`` stream.
    """
    s3_client = s3_client or boto3.client("s3")
    return s3_client.get_object(Bucket=bucket_name, Key=object_key)


def fetch_s3_object_bytes(
    bucket_name: str,
    object_key: str,
    s3_client: Optional[S3Client] = None,
) -> bytes:
    """Read the whole content of an object into memory."""
    response = fetch_s3_object(bucket_name, object_key, s3_client=s3_client)
    body = response["Body"]
    try:
        return body.read()
    finally:
        body.close()


def fetch_s3_objects_metadata(
    bucket_name: str,
    prefix: Optional[str] = None,
    max_keys: int = DEFAULT_MAX_KEYS,
    s3_client: Optional[S3Client] = None,
) -> Tuple[List[ObjectTypeDef], Optional[str]]:
    """
    Fetch the first page of objects under a prefix.

    :param bucket_name: Name of the S3 bucket to list objects from.
    :param prefix: Prefix to filter objects by. ``None`` or ``""`` lists the whole bucket.
    :param max_keys: Maximum number of keys to fetch.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: The object summaries of the page and the continuation token of the next page, if any.
    """
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.list_objects_v2(Bucket=bucket_name, Prefix=prefix or "", MaxKeys=max_keys)
    files: List[ObjectTypeDef] = response.get("Contents", [])
    next_page_token = response.get("NextContinuationToken") if response.get("IsTruncated") else None
    return files, next_page_token


def fetch_s3_objects_using_page_token(
    bucket_name: str,
    continuation_token: str,
    prefix: Optional[str] = None,
    max_keys: int = DEFAULT_MAX_KEYS,
    s3_client: Optional[S3Client] = None,
) -> Tuple[List[ObjectTypeDef], Optional[str]]:
    """
    Fetch the next page of objects using a continuation token.

    The prefix of the original listing is sent again with the token.

    :param bucket_name: Name of the S3 bucket to list objects from.
    :param continuation_token: Token returned by the previous page.
    :param prefix: The prefix of the original listing.
    :param max_keys: Maximum number of keys to fetch.
    :param s3_client: Optional S3 client to use. If not provided, a new client will be created.

    :return: The object summaries of the page and the continuation token of the next page, if any.
    """
    s3_client = s3_client or boto3.client("s3")
    response = s3_client.list_objects_v2(
        Bucket=bucket_name,
        Prefix=prefix or "",
        MaxKeys=max_keys,
        ContinuationToken=continuation_token,
    )
    files: List[ObjectTypeDef] = response.get("Contents", [])
    next_page_token = response.get("NextContinuationToken") if response.get("IsTruncated") else None
    return files, next_page_token
