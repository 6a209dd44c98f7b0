from contextlib import asynccontextmanager

from fastapi import FastAPI

from dooriq.api.exceptions.handlers import register_exception_handlers
from dooriq.api.routes.grades import router as grades_router
from dooriq.api.routes.sessions import router as sessions_router
from dooriq.database import init_db
from dooriq.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="DoorIQ Grading Service",
    version=settings.API_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}

app.include_router(grades_router)
app.include_router(sessions_router)
register_exception_handlers(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("dooriq.main:app", host="127.0.0.1", port=8000, reload=settings.DEBUG)
