# main.py
import logging
import uvicorn
from storefront.app import create_app
from storefront.config import Config, setup_logging

def main():
    # Setup logging
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        Config.validate()
        app = create_app()
        logger.info(f"Starting API on {Config.HOST}:{Config.PORT}...")
        uvicorn.run(app, host=Config.HOST, port=Config.PORT, log_config=None)
    except Exception as e:
        logger.error(f"Error starting API: {e}", exc_info=True)
        raise

if __name__ == "__main__":
    main()
