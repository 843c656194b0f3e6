import asyncio

from fastapi import HTTPException, UploadFile, status

from app.services.media_storage import MediaStorage


def has_file(upload: UploadFile | None) -> bool:
    return bool(upload and upload.filename)


def _format_limit(max_bytes: int) -> str:
    mib = 1024 * 1024
    if max_bytes >= mib and max_bytes % mib == 0:
        return f"{max_bytes // mib} MiB"
    return f"{max_bytes} bytes"


async def read_upload(upload: UploadFile, max_bytes: int) -> bytes:
    contents = await upload.read(max_bytes + 1)
    if len(contents) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File {upload.filename} exceeds the {_format_limit(max_bytes)} limit",
        )
    return contents


async def store_uploads(storage: MediaStorage, uploads: list[UploadFile], max_bytes: int) -> list[str]:
    """Size-check every upload, then store them concurrently.

    Returns URLs in upload order. Nothing is stored if any upload is too
    large, and any store failure propagates to the caller.
    """
    payloads = [await read_upload(upload, max_bytes) for upload in uploads]
    urls = await asyncio.gather(
        *(
            asyncio.to_thread(storage.store, data, upload.filename, upload.content_type)
            for data, upload in zip(payloads, uploads)
        )
    )
    return list(urls)


async def store_upload(storage: MediaStorage, upload: UploadFile, max_bytes: int) -> str:
    urls = await store_uploads(storage, [upload], max_bytes)
    return urls[0]
