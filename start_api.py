#!/usr/bin/env python3
"""
Run migrations (same process, same DATABASE_URL), then seed, then uvicorn.
Ensures tables exist before seed and app start.
"""
import os
import sys

# 1) Run migrations using the same settings as the app
from ticketpro.core.config import settings
from alembic.config import Config
from alembic import command

alembic_cfg = Config(os.path.join(os.path.dirname(__file__), "alembic.ini"))
alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
command.upgrade(alembic_cfg, "head")

# 2) Seed using an engine created *after* migrations (avoids app engine created during Alembic env load)
from sqlalchemy.orm import sessionmaker
from ticketpro.db.session import make_engine
seed_engine = make_engine(settings.DATABASE_URL)
SeedSession = sessionmaker(autocommit=False, autoflush=False, bind=seed_engine)
seed_db = SeedSession()
from ticketpro.seed import run as run_seed
run_seed(seed_db)
seed_db.close()
seed_engine.dispose()

# 3) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "ticketpro.main:app", "--host", "0.0.0.0", "--port", os.environ.get("PORT", "8000")],
)
