import io
from typing import List

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.responses import PlainTextResponse, Response

from storage_api.dependencies import get_storage_gateway
from storage_api.gateway import StorageGateway, UploadRequest
from storage_api.schemas import (
    EXAMPLE_FILE_URL,
    FILE_DELETED_MESSAGE,
    FILES_DELETED_MESSAGE,
    ErrorResponse,
)

router = APIRouter()

INVALID_URL_RESPONSE = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "URL does not belong to the bucket"},
}
NOT_FOUND_RESPONSE = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "File not found"},
}
SERVER_ERROR_RESPONSE = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Storage backend failure"},
}
TEXT_RESPONSE = {
    status.HTTP_200_OK: {"content": {"text/plain": {"example": EXAMPLE_FILE_URL}}},
}


def _to_upload_request(upload: UploadFile) -> UploadRequest:
    # read the part eagerly so the length is known before it reaches S3
    content = upload.file.read()
    return UploadRequest(
        filename=upload.filename or "",
        content_type=upload.content_type,
        length=len(content),
        stream=io.BytesIO(content),
    )


@router.post(
    "/upload",
    response_class=PlainTextResponse,
    responses={**TEXT_RESPONSE, **SERVER_ERROR_RESPONSE},
    summary="Upload a single file",
)
def upload_file(
    file: UploadFile = File(..., description="The file to upload"),
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> PlainTextResponse:
    """
    Upload one file as a public-read object and return its public URL.

    The object key is `<uuid>_<filename>` with whitespace runs in the filename
    replaced by underscores, so uploading the same filename twice never overwrites.
    """
    upload = _to_upload_request(file)
    file_url = gateway.save(upload.filename, upload.content_type, upload.length, upload.stream)
    return PlainTextResponse(file_url)


@router.post(
    "/batch-upload",
    response_model=List[str],
    responses={
        status.HTTP_200_OK: {"content": {"application/json": {"example": [EXAMPLE_FILE_URL]}}},
        **SERVER_ERROR_RESPONSE,
    },
    summary="Upload several files",
)
def upload_files(
    photos: List[UploadFile] = File(..., description="The files to upload"),
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> List[str]:
    """
    Upload every file and return their public URLs in the order they were sent.

    Files are uploaded one after another. If one fails the remaining files are
    skipped and the ones already uploaded stay in the bucket.
    """
    return gateway.save_many([_to_upload_request(photo) for photo in photos])


@router.delete(
    "/delete",
    response_class=PlainTextResponse,
    responses={**INVALID_URL_RESPONSE, **SERVER_ERROR_RESPONSE},
    summary="Delete a file",
)
def delete_file(
    url: str = Query(..., description="Public URL of the file to delete"),
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> PlainTextResponse:
    """Delete the file behind a public URL. Deleting a file that is already gone succeeds."""
    gateway.delete(url)
    return PlainTextResponse(FILE_DELETED_MESSAGE)


@router.delete(
    "/batch-delete",
    response_class=PlainTextResponse,
    responses={**INVALID_URL_RESPONSE, **SERVER_ERROR_RESPONSE},
    summary="Delete several files",
)
def delete_files(
    urls: List[str] = Query(..., description="Public URLs of the files to delete"),
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> PlainTextResponse:
    """
    Delete every URL in the order given.

    The first failure stops the batch; files deleted before it stay deleted.
    """
    gateway.delete_many(urls)
    return PlainTextResponse(FILES_DELETED_MESSAGE)


@router.get(
    "/download",
    response_class=Response,
    responses={
        status.HTTP_200_OK: {"content": {"application/octet-stream": {}}},
        **INVALID_URL_RESPONSE,
        **NOT_FOUND_RESPONSE,
        **SERVER_ERROR_RESPONSE,
    },
    summary="Download a file",
)
def download_file(
    url: str = Query(..., description="Public URL of the file to download"),
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> Response:
    """Return the raw bytes of the file behind a public URL."""
    content = gateway.load(url)
    return Response(content=content, media_type="application/octet-stream")


@router.get(
    "/list",
    response_model=List[str],
    responses={
        status.HTTP_200_OK: {"content": {"application/json": {"example": [EXAMPLE_FILE_URL]}}},
        **SERVER_ERROR_RESPONSE,
    },
    summary="List files in a folder",
)
def list_files(
    folder: str = Query("", description="Key prefix to list, e.g. `folder/subfolder/`. Empty lists the whole bucket."),
    gateway: StorageGateway = Depends(get_storage_gateway),
) -> List[str]:
    """Return the public URLs of every file whose key starts with `folder`."""
    return gateway.list(folder)
