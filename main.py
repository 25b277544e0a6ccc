import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from poetportal.core import config
from poetportal.core.errors import PortalError, Unauthenticated
from poetportal.api.v1 import auth, user
from poetportal.db.base import Base
from poetportal.db.session import engine
from poetportal.routers import post
from poetportal.routers import comment as comment_router
from poetportal.routers import like
from poetportal.routers import follow as follow_router
from poetportal.routers import admin

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="PoetPortal API")


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logging.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(user.router, prefix="/api/users", tags=["Users"])
app.include_router(follow_router.router, prefix="/api/users", tags=["Follows"])
app.include_router(post.router, prefix="/api/posts", tags=["Posts"])
app.include_router(comment_router.router, prefix="/api/comments", tags=["Comments"])
app.include_router(like.router, prefix="/api/likes", tags=["Likes"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
