import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from postdesk import dependencies as deps
from postdesk.errors import ImageNotFoundError, ImageUploadError
from postdesk.schemas.images import (
    BatchUploadResult,
    ImageDeleteRequest,
    ImageDeleteResult,
    ImageInfo,
    ImageListResult,
    ImageUploadFailure,
    ImageUploadResult,
)
from postdesk.security import get_settings
from postdesk.services.image_service import ImageAsset, ImageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/upload-image", response_model=ImageUploadResult)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    blogTitle: str = Form("untitled"),
    service: ImageService = Depends(deps.get_image_service),
):
    """Store one uploaded image and return its public URL."""
    if image is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        data = await _read_capped(image, service.max_bytes)
        asset = service.save(data, image.filename or "", image.content_type, blogTitle)
    except ImageUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Image upload failed: {e}")
        raise HTTPException(status_code=500, detail="Upload failed")

    return _upload_result(asset)


@router.post("/upload-images", response_model=BatchUploadResult)
async def upload_images(
    images: Optional[List[UploadFile]] = File(None),
    blogTitle: str = Form("untitled"),
    service: ImageService = Depends(deps.get_image_service),
    current_settings=Depends(get_settings),
):
    """Store several images; each file succeeds or fails on its own."""
    if not images:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if len(images) > current_settings.MAX_BATCH_IMAGES:
        raise HTTPException(
            status_code=400,
            detail=f"At most {current_settings.MAX_BATCH_IMAGES} files per request",
        )

    results = []
    for upload in images:
        name = upload.filename or ""
        try:
            data = await _read_capped(upload, service.max_bytes)
            asset = service.save(data, name, upload.content_type, blogTitle)
            results.append(_upload_result(asset))
        except (ImageUploadError, OSError) as e:
            logger.warning(f"Skipping upload {name}: {e}")
            results.append(ImageUploadFailure(originalName=name, error=str(e)))

    uploaded = sum(1 for r in results if r.success)
    return BatchUploadResult(
        results=results, uploaded=uploaded, failed=len(results) - uploaded
    )


@router.delete("/delete-image", response_model=ImageDeleteResult)
def delete_image(
    request: ImageDeleteRequest,
    service: ImageService = Depends(deps.get_image_service),
):
    try:
        service.delete(request.imagePath)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid image path")
    except ImageNotFoundError:
        raise HTTPException(status_code=404, detail="Image not found")
    except Exception as e:
        logger.error(f"Image delete failed for {request.imagePath}: {e}")
        raise HTTPException(status_code=500, detail="Delete failed")

    return ImageDeleteResult(message="Image deleted")


@router.get("/images/{year}/{month}/{blog}", response_model=ImageListResult)
def list_images(
    year: str,
    month: str,
    blog: str,
    service: ImageService = Depends(deps.get_image_service),
):
    try:
        assets = service.list_images(year, month, blog)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid image path")
    except ImageNotFoundError:
        raise HTTPException(status_code=404, detail="Directory not found")

    images = [
        ImageInfo(filename=a.filename, url=a.url, path=a.path, size=a.size)
        for a in assets
    ]
    return ImageListResult(images=images, count=len(images))


async def _read_capped(upload: UploadFile, max_bytes: int) -> bytes:
    # one byte past the limit is enough for validate_upload to reject it
    if upload.size is not None and upload.size > max_bytes:
        raise ImageUploadError(f"Image exceeds the {max_bytes} byte limit")
    return await upload.read(max_bytes + 1)


def _upload_result(asset: ImageAsset) -> ImageUploadResult:
    return ImageUploadResult(
        url=asset.url,
        filename=asset.filename,
        originalName=asset.original_name or asset.filename,
        size=asset.size,
        path=asset.path,
    )
