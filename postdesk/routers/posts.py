import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from postdesk import dependencies as deps
from postdesk.errors import (
    MalformedInputError,
    PartialWriteError,
    PostConflictError,
    PostNotFoundError,
    PostWriteError,
)
from postdesk.schemas.blog import (
    PostDeleteResult,
    PostDetail,
    PostPayload,
    PostSummary,
    PostWriteResult,
)
from postdesk.services.posts_service import PostsService
from postdesk.services.site_builder import SiteBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/posts", response_model=List[PostSummary])
def list_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Get all posts metadata, newest first."""
    try:
        return service.list_posts()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        return service.get_post(slug)
    except PostNotFoundError:
        raise HTTPException(status_code=404, detail="Post not found")
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.post("/posts", response_model=PostWriteResult, status_code=201)
def create_post(
    payload: PostPayload,
    background_tasks: BackgroundTasks,
    service: PostsService = Depends(deps.get_posts_service),
    site_builder: SiteBuilder = Depends(deps.get_site_builder),
):
    try:
        result = service.create_post(payload)
    except MalformedInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PostWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error creating post: {e}")
        raise HTTPException(status_code=500, detail="Failed to create post")

    background_tasks.add_task(site_builder.regenerate)
    return result


@router.put("/posts/{slug}", response_model=PostWriteResult)
def update_post(
    slug: str,
    payload: PostPayload,
    background_tasks: BackgroundTasks,
    service: PostsService = Depends(deps.get_posts_service),
    site_builder: SiteBuilder = Depends(deps.get_site_builder),
):
    try:
        result = service.update_post(slug, payload)
    except MalformedInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PostNotFoundError:
        raise HTTPException(status_code=404, detail="Post not found")
    except PostConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PartialWriteError as e:
        raise HTTPException(
            status_code=500,
            detail=(
                f"Post saved as {e.new_filename} "
                f"but {e.old_filename} could not be removed"
            ),
        )
    except PostWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error updating post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update post")

    background_tasks.add_task(site_builder.regenerate)
    return result


@router.delete("/posts/{slug}", response_model=PostDeleteResult)
def delete_post(
    slug: str,
    background_tasks: BackgroundTasks,
    service: PostsService = Depends(deps.get_posts_service),
    site_builder: SiteBuilder = Depends(deps.get_site_builder),
):
    try:
        filename = service.delete_post(slug)
    except PostNotFoundError:
        raise HTTPException(status_code=404, detail="Post not found")
    except Exception as e:
        logger.error(f"Unexpected error deleting post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete post")

    background_tasks.add_task(site_builder.regenerate)
    return PostDeleteResult(message="Post deleted", filename=filename)
