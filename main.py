"""
Geo API Server - Main Entry Point

Initializes the services and starts the Flask application.
"""

from geo_api import create_app
from geo_api.config import Config, DEFAULT_SECRET_KEY
from geo_api.services.credential_service import initialize_credential_service
from geo_api.services.user_service import initialize_user_service
from geo_api.utils.api_logger import api_logger


def main():
    """Main function to initialize services and start the server."""
    try:
        if Config.SECRET_KEY == DEFAULT_SECRET_KEY:
            api_logger.logger.warning("SECRET_KEY is not set, tokens are signed with the default secret")
        
        initialize_user_service(Config.MONGO_URI, Config.MONGO_DB_NAME)
        initialize_credential_service(Config.SECRET_KEY, Config.JWT_EXPIRATION_DAYS, Config.BCRYPT_ROUNDS)
        
        app = create_app(Config)
        
        api_logger.logger.info(f"Geo API starting on {Config.HOST}:{Config.PORT} (debug={Config.DEBUG})")
        app.run(host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)
        
    except KeyboardInterrupt:
        api_logger.logger.info("Geo API shutting down (KeyboardInterrupt)")
    except Exception as e:
        api_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
