from contextlib import contextmanager
from typing import Optional

import redis
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_socketio import SocketIO
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

"""create uninitialized extension objects to avoid circular imports"""
Base = declarative_base()
engine = None
SessionLocal = None
socketio = SocketIO(cors_allowed_origins="*")
limiter = Limiter(key_func=get_remote_address)

""" resources that require app config, created in init_... functions"""
redis_client: Optional[redis.Redis] = None

IN_MEMORY_SQLITE = ("sqlite://", "sqlite:///:memory:")


def init_db(app: Flask):
    """Initialize SQLAlchemy engine & sessionmaker"""
    global engine, SessionLocal
    database_url = app.config.get("SQLALCHEMY_DATABASE_URI", "sqlite:///./dev.db")
    engine_options = {"echo": app.config.get("SQLALCHEMY_ECHO", False), "future": True}
    if database_url in IN_MEMORY_SQLITE:
        # every session must see the same in-memory database
        engine_options["connect_args"] = {"check_same_thread": False}
        engine_options["poolclass"] = StaticPool

    engine = create_engine(database_url, **engine_options)
    SessionLocal = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    )
    from riderdesk.Database.order import Order
    from riderdesk.Database.profile import Profile
    from riderdesk.Database.delivery_task import DeliveryTask
    from riderdesk.Database.notifications import Notification

    Base.metadata.create_all(bind=engine)
    return engine, SessionLocal


def get_session():
    if SessionLocal is None:
        raise RuntimeError("Database not initialized. Call init_db(app) first.")
    return SessionLocal()


def init_redis(app: Flask):
    global redis_client
    redis_url = app.config.get("REDIS_URL")
    redis_client = redis.from_url(redis_url, decode_responses=True) if redis_url else None
    return redis_client


@contextmanager
def session_scope():
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def emit_to_room(room: str, event: str, data: dict):
    """
    Emit a Socket.IO event to a specific room.
    Uses the globally initialized socketio instance.
    """
    socketio.emit(
        event,
        data,
        room=room,
    )
