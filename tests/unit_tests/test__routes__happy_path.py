import re

from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import TEST_BASE_URL, TEST_BUCKET_NAME

TEST_FILE_NAME = "My Report.pdf"
TEST_FILE_CONTENT = b"ABC"
TEST_FILE_CONTENT_TYPE = "application/pdf"


def upload(client: TestClient, filename: str = TEST_FILE_NAME, content: bytes = TEST_FILE_CONTENT) -> str:
    response = client.post(
        "/files/upload",
        files={"file": (filename, content, TEST_FILE_CONTENT_TYPE)},
    )
    assert response.status_code == status.HTTP_200_OK
    return response.text


def test__upload_file__returns_public_url(client: TestClient):
    response = client.post(
        "/files/upload",
        files={"file": (TEST_FILE_NAME, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.startswith(TEST_BASE_URL)
    assert re.match(r".*_My_Report\.pdf$", response.text)


def test__upload_then_download_then_delete(client: TestClient):
    file_url = upload(client)

    response = client.get("/files/download", params={"url": file_url})
    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "application/octet-stream"
    assert response.content == TEST_FILE_CONTENT

    response = client.delete("/files/delete", params={"url": file_url})
    assert response.status_code == status.HTTP_200_OK
    assert response.text == "File deleted successfully."

    # the file should not be found if it was deleted
    response = client.get("/files/download", params={"url": file_url})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test__batch_upload__preserves_order(client: TestClient):
    response = client.post(
        "/files/batch-upload",
        files=[
            ("photos", ("first photo.jpg", b"first", "image/jpeg")),
            ("photos", ("second.jpg", b"second", "image/jpeg")),
            ("photos", ("third.png", b"third", "image/png")),
        ],
    )

    assert response.status_code == status.HTTP_200_OK
    urls = response.json()
    assert len(urls) == 3
    assert urls[0].endswith("_first_photo.jpg")
    assert urls[1].endswith("_second.jpg")
    assert urls[2].endswith("_third.png")

    for url, expected in zip(urls, (b"first", b"second", b"third")):
        assert client.get("/files/download", params={"url": url}).content == expected


def test__batch_delete(client: TestClient):
    kept_url = upload(client, "keep.txt", b"keep")
    doomed_urls = [upload(client, f"doomed{i}.txt", b"x") for i in range(2)]

    response = client.delete("/files/batch-delete", params=[("urls", url) for url in doomed_urls])

    assert response.status_code == status.HTTP_200_OK
    assert response.text == "Files deleted successfully."
    assert client.get("/files/list").json() == [kept_url]


def test__list_files__by_folder(client: TestClient, s3_client):
    for key in ("test-folder/file1.txt", "test-folder/file2.txt", "other/file3.txt"):
        s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key=key, Body=b"content")

    response = client.get("/files/list", params={"folder": "test-folder/"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [
        TEST_BASE_URL + "test-folder/file1.txt",
        TEST_BASE_URL + "test-folder/file2.txt",
    ]


def test__list_files__without_folder_lists_root(client: TestClient, s3_client):
    for key in ("a.txt", "nested/b.txt"):
        s3_client.put_object(Bucket=TEST_BUCKET_NAME, Key=key, Body=b"content")

    response = client.get("/files/list")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [TEST_BASE_URL + "a.txt", TEST_BASE_URL + "nested/b.txt"]


def test__health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "status": "ok",
        "deployment_mode": "aws-prod",
        "bucket": TEST_BUCKET_NAME,
        "base_url": TEST_BASE_URL,
    }


def test__openapi_operation_ids(client: TestClient):
    schema = client.get("/openapi.json").json()

    operation_ids = {
        operation["operationId"]
        for path in schema["paths"].values()
        for operation in path.values()
    }
    assert {"files-upload_file", "files-upload_files", "files-delete_file", "files-delete_files",
            "files-download_file", "files-list_files", "health-health_check"} <= operation_ids
