import uvicorn
from fastapi import FastAPI

from watchpick.config.settings import UVICORN_CONFIG
from watchpick.server.api.rest.dependencies import shutdown_dependencies
from watchpick.server.api_router import api_router

app = FastAPI(title="Watchpick", description="Watchlist with title search and random pick")

app.include_router(api_router)


@app.on_event("shutdown")
async def shutdown_event():
    """Close HTTP sessions held by the catalog and identity clients."""
    await shutdown_dependencies()


def main() -> None:
    uvicorn.run("watchpick.server.main:app", **UVICORN_CONFIG)


if __name__ == "__main__":
    main()
