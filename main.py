import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from name_combiner.api.router import router
from name_combiner.configuration import ConfigProvider, close_connection, get_config_provider, setup_config_store

app = FastAPI(title="Name Combiner Service")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(router)


@app.on_event("startup")
async def startup():
    try:
        logger.info("Starting up application...")
        await setup_config_store()

        provider: ConfigProvider = get_config_provider()
        if not provider.is_configured():
            raise RuntimeError("Configuration setup failed")

        logger.info("Application startup completed successfully")

    except Exception as e:
        logger.error(f"Failed to start application: {e}")
        raise


@app.on_event("shutdown")
async def shutdown():
    try:
        if get_config_provider().is_configured():
            await close_connection()
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Error closing database connection: {e}")


if __name__ == "__main__":
    uvicorn.run(app="main:app", host="0.0.0.0", port=8000)
