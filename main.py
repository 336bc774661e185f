import uvicorn

from food_registry.api import create_app
from food_registry.config import configure_logging, get_config


if __name__ == "__main__":
    config = get_config()
    configure_logging(config.logging)

    uvicorn.run(create_app(), host=config.api.host, port=config.api.port)
