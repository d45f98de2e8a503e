from fastapi import Depends

from postdesk.repos.posts_repo import FilePostsRepo
from postdesk.security import get_settings
from postdesk.services.image_service import ImageService
from postdesk.services.posts_service import PostsService
from postdesk.services.site_builder import SiteBuilder


def get_posts_repo(current_settings=Depends(get_settings)):
    return FilePostsRepo(current_settings.posts_path)


def get_posts_service(repo=Depends(get_posts_repo)):
    return PostsService(repo=repo)


def get_image_service(current_settings=Depends(get_settings)):
    return ImageService(
        current_settings.images_path,
        url_prefix=current_settings.IMAGES_URL_PREFIX,
        max_bytes=current_settings.MAX_IMAGE_BYTES,
    )


def get_site_builder(current_settings=Depends(get_settings)):
    return SiteBuilder(
        current_settings.REGENERATE_COMMAND,
        cwd=current_settings.SITE_DIR,
        enabled=current_settings.REGENERATE_ENABLED,
        timeout=current_settings.REGENERATE_TIMEOUT_SECONDS,
    )
