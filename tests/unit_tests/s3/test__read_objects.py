import pytest
from botocore.exceptions import ClientError

from storage_api.s3.read_objects import (
    fetch_s3_object_bytes,
    fetch_s3_objects_metadata,
    fetch_s3_objects_using_page_token,
    is_not_found_error,
)
from tests.consts import TEST_BUCKET_NAME


def test__fetch_s3_object_bytes(s3_client):
    s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key="data.bin", Body=b"\x00\x01\x02")

    assert fetch_s3_object_bytes(TEST_BUCKET_NAME, "data.bin", s3_client=s3_client) == b"\x00\x01\x02"


def test__fetch_s3_object_bytes__missing_key_is_not_found(s3_client):
    with pytest.raises(ClientError) as exc_info:
        fetch_s3_object_bytes(TEST_BUCKET_NAME, "missing.bin", s3_client=s3_client)

    assert is_not_found_error(exc_info.value)


def test__is_not_found_error__other_codes():
    err = ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "GetObject")

    assert not is_not_found_error(err)


def test__fetch_s3_objects__pages_through_prefix(s3_client):
    for i in range(5):
        s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key=f"folder/file{i}.txt", Body=b"content")
    s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key="elsewhere.txt", Body=b"content")

    files, next_page_token = fetch_s3_objects_metadata(TEST_BUCKET_NAME, prefix="folder/", max_keys=3, s3_client=s3_client)
    assert [obj["Key"] for obj in files] == ["folder/file0.txt", "folder/file1.txt", "folder/file2.txt"]
    assert next_page_token

    files, next_page_token = fetch_s3_objects_using_page_token(
        TEST_BUCKET_NAME, next_page_token, prefix="folder/", max_keys=3, s3_client=s3_client
    )
    assert [obj["Key"] for obj in files] == ["folder/file3.txt", "folder/file4.txt"]
    assert next_page_token is None


def test__fetch_s3_objects_metadata__empty_prefix(s3_client):
    files, next_page_token = fetch_s3_objects_metadata(TEST_BUCKET_NAME, s3_client=s3_client)

    assert files == []
    assert next_page_token is None
