"""
Geo API Application Package

User accounts for the geography guessing game: CRUD, score listings,
registration and token-based login, served by Flask over MongoDB.
"""

from flask import Flask
from flask_cors import CORS
from .config import Config


def create_app(config_class=Config, authenticator=None):
    """
    Application factory pattern for creating Flask app instances.
    
    The user and credential services must be initialized beforehand.
    
    Args:
        config_class: Configuration class to use
        authenticator: Callable taking the request and returning a principal
            or None; defaults to bearer token verification
        
    Returns:
        Flask application instance with all extensions initialized
    """
    from .services.credential_service import get_credential_service
    from .utils.errors import register_error_handlers
    
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    # Initialize extensions
    CORS(app, expose_headers=['Link', 'Location'])
    
    if authenticator is None:
        credential_service = get_credential_service()
        authenticator = credential_service.authenticate if credential_service else None
    app.extensions['authenticate'] = authenticator
    
    # Register blueprints
    from .controllers.user_controller import users_bp
    
    app.register_blueprint(users_bp, url_prefix='/api/users')
    
    register_error_handlers(app)
    
    return app
