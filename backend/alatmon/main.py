from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from .config import CORS_ORIGINS, LOG_LEVEL
from .db import Base, engine, get_db
from .schemas import (
    RegisterIn, RegisterOut, LoginIn, LoginOut, UserOut,
    AlatIn, HistorySaveIn, HistoryListOut, MonitoringOut,
)
from .auth import Claims, create_token, require_session
from .errors import AlatError, PersistenceError
from .timeutil import format_timestamp
from . import users, devices, ledger, archiver

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Alat monitoring API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database ready")

@app.exception_handler(AlatError)
async def alat_error_handler(request: Request, exc: AlatError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())

@app.exception_handler(SQLAlchemyError)
async def db_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("database error on %s %s", request.method, request.url.path)
    err = PersistenceError(detail=str(exc.orig) if getattr(exc, "orig", None) else str(exc))
    return JSONResponse(status_code=err.status_code, content=err.to_body())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})

@app.get("/")
async def root():
    return {"status": "ok", "message": "Backend is running."}

# --- auth ---

@app.post("/auth/register", response_model=RegisterOut, status_code=201)
async def register(body: RegisterIn, db: AsyncSession = Depends(get_db)):
    user = await users.register(db, body.username, body.email, body.no_telp, body.password)
    return RegisterOut(user=UserOut(username=user.username, email=user.email))

@app.post("/auth/login", response_model=LoginOut)
async def login(body: LoginIn, db: AsyncSession = Depends(get_db)):
    user = await users.verify(db, body.email, body.password)
    return LoginOut(token=create_token(user), user=UserOut(username=user.username, email=user.email))

# --- alat (owner only) ---

@app.post("/alat/add-alat", status_code=201)
async def add_alat(body: AlatIn, claims: Claims = Depends(require_session), db: AsyncSession = Depends(get_db)):
    alat = await devices.add_device(db, claims.username, body.nama_anak, body.usia, body.jeniskelamin, body.idalat)
    return {"message": "Alat added successfully", "data": alat.to_dict()}

@app.get("/alat/list-alat")
async def list_alat(claims: Claims = Depends(require_session), db: AsyncSession = Depends(get_db)):
    rows = await devices.list_devices(db, claims.username)
    if not rows:
        return JSONResponse(status_code=404, content={"message": "No alat found for this user"})
    return {"message": "Data retrieved successfully", "alat": [r.to_dict() for r in rows]}

# --- monitoring / history (public) ---

@app.get("/monitoring/latest/{idalat}")
async def latest_monitoring(idalat: str, db: AsyncSession = Depends(get_db)):
    row = await ledger.get_latest(db, idalat)
    if row is None:
        # device known but silent: not an error
        return {"message": "Alat belum dihidupkan"}
    return {"data": MonitoringOut(**row.to_dict())}

@app.post("/history/save", status_code=201)
async def save_history(body: HistorySaveIn, db: AsyncSession = Depends(get_db)):
    record = await archiver.archive(db, body.idalat, body.duration)
    return {
        "message": "History saved successfully",
        "history": {
            "idalat": record.idalat,
            "created_at": format_timestamp(record.created_at),
            "duration": record.duration,
        },
    }

@app.get("/history/{idalat}", response_model=HistoryListOut)
async def get_history(idalat: str, db: AsyncSession = Depends(get_db)):
    rows = await archiver.list_history(db, idalat)
    return HistoryListOut(history=[
        {"created_at": format_timestamp(r.created_at), "duration": r.duration} for r in rows
    ])
