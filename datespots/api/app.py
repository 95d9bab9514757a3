"""FastAPI app, CORS, startup load, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from datespots.config import LOG_LEVEL, LOAD_ON_STARTUP, STORE_URL

# Configure logging in the worker process (so loader/store INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(levelname)s: %(name)s: %(message)s",
)

from datespots.api.state import AppState, get_state
from datespots.core.loader import StoryLoader

# Import routes after state to avoid circular imports
from datespots.api.routes import filters, form, map_view, page, stories

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


def _resolve_state(app: FastAPI) -> AppState:
    """State the routes will see (honours dependency_overrides, e.g. in tests)."""
    return app.dependency_overrides.get(get_state, get_state)()


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = _resolve_state(app)
    loader = None
    if LOAD_ON_STARTUP:
        loader = StoryLoader(load=state.fetch_stories, apply=state.replace_stories)
        loader.start()
        logger.info("Loading stories from %s", STORE_URL)

    yield

    if loader is not None:
        loader.stop()
    state.close()


app = FastAPI(
    title="Dates of Bangalore",
    description="Map of crowd-sourced date spot stories",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(page.router, tags=["page"])
app.include_router(stories.router, prefix="/api/stories", tags=["stories"])
app.include_router(filters.router, prefix="/api/filters", tags=["filters"])
app.include_router(map_view.router, prefix="/api/map", tags=["map"])
app.include_router(form.router, prefix="/api/form", tags=["form"])
