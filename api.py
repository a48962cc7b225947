import logging

import uvicorn
from config import ApplicationConfig
from authtrail.api.app import create_app

logging.basicConfig(
    level=str(ApplicationConfig.LOG_LEVEL).upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(ApplicationConfig)

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=ApplicationConfig.API_HOST,
        port=ApplicationConfig.API_PORT,
        reload=True,
        log_level=str(ApplicationConfig.LOG_LEVEL).lower(),
    )
