from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from core import config, db
from core.logging_config import setup_logging
from people import router as people_router

@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging(config.log_level())
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="people-api", lifespan=lifespan)

app.include_router(people_router.router, tags=["people"])


def run() -> None:
    # Real environment variables win over .env entries.
    load_dotenv(override=False)
    host, port = config.listen_address()
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
