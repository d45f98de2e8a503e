import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from postdesk.routers import images, posts
from postdesk.security import get_api_token
from postdesk.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Postdesk API", description="Markdown blog editor backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(posts.router, dependencies=[Depends(get_api_token)])
app.include_router(images.router, dependencies=[Depends(get_api_token)])

# uploaded images are public, like the generated site
app.mount(
    settings.IMAGES_URL_PREFIX,
    StaticFiles(directory=settings.images_path, check_dir=False),
    name="images",
)


@app.get("/")
async def root():
    return {"message": "Postdesk API is running"}
