"""Main FastAPI application for Hidato Solver."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import check_config, router


@asynccontextmanager
async def _app_lifespan(_: FastAPI):
    """Validate solver settings so misconfiguration fails at startup."""
    error = check_config()
    if error:
        raise RuntimeError(f"Invalid solver configuration: {error}")
    yield


app = FastAPI(
    title="Hidato Solver API",
    description="API for solving Hidato puzzles from JSON grids",
    version="1.0.0",
    lifespan=_app_lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Hidato Solver API", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("hidato.main:app", host="0.0.0.0", port=8000, reload=True)
