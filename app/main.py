import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import CORS_ORIGINS, LOG_LEVEL, SEED_DEMO_DATA
from app.core.database import SessionLocal, init_db
from app.routes import auth, games, users, inventory, marketplace, trades
from app.services.seed import seed_demo_data

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger("itemvault.main")

app = FastAPI(title="Item Vault", description="Game item ownership, marketplace and escrow trades")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(games.router)
app.include_router(users.router)
app.include_router(inventory.router)
app.include_router(marketplace.router)
app.include_router(trades.router)


@app.get("/health", tags=["system"])
def health():
    return {"status": "ok"}


@app.on_event("startup")
def on_startup():
    if not SEED_DEMO_DATA:
        return
    # Demo mode: create tables and seed sample games, users and items
    init_db()
    db = SessionLocal()
    try:
        seed_demo_data(db)
        logger.info("Demo data seeded")
    finally:
        db.close()
