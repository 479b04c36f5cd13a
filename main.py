import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from quizme.core.config import settings
from quizme.core.database import Base, engine
from quizme.core.errors import QuizMeError
from quizme.models.quiz_db import quiz_db  # noqa: F401
from quizme.models.attempt_db import attempt_db  # noqa: F401
from quizme.models.result_db import result_db  # noqa: F401
from quizme.routes.quiz.quiz_routers import quiz_router
from quizme.routes.attempt.attempt_routers import attempt_router
from quizme.routes.result.result_routers import result_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")
    yield


app = FastAPI(title="QuizMe API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QuizMeError)
async def quizme_error_handler(request: Request, exc: QuizMeError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"kind": exc.kind, "detail": exc.detail})


app.include_router(quiz_router)
app.include_router(attempt_router)
app.include_router(result_router)


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>QuizMe</title>
        </head>
        <body>
            <h1>QuizMe API</h1>
            <p>See the API documentation <a href="/docs">here</a>.</p>
        </body>
    </html>
    """


@app.get("/health")
async def health():
    return {"status": "ok"}
