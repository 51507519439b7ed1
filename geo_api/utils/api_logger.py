"""
API Logger Module

Structured logging of user actions, server responses and errors for the
user resource endpoints.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any
from pathlib import Path

from ..config import Config

SENSITIVE_FIELDS = ('password', 'token')
FILE_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


class ApiLogger:
    """
    Centralized logging for the API server.
    
    Features:
    - User action tracking with IP identification
    - Server response logging
    - JSON structured log entries
    - Passwords and tokens masked before anything is written
    """
    
    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = logging.getLevelName(level.upper())
        if not isinstance(self.level, int):
            self.level = logging.INFO
        
        self.log_file = self.log_dir / f"api_log_{datetime.now():%Y-%m-%d}.log"
        self.logger = self._setup_logger()
        
    def _setup_logger(self) -> logging.Logger:
        """Attach a dated file handler and a warnings-only console handler to the 'geo_api' logger."""
        logger = logging.getLogger('geo_api')
        logger.setLevel(self.level)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        
        handler_specs = (
            (logging.FileHandler(self.log_file, encoding='utf-8'), self.level, FILE_FORMAT),
            (logging.StreamHandler(), logging.WARNING, CONSOLE_FORMAT),
        )
        for handler, level, fmt in handler_specs:
            handler.setLevel(level)
            handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
            logger.addHandler(handler)
        
        return logger
    
    def _get_user_identity(self, request) -> Dict[str, Any]:
        """Extract user identity information from request."""
        return {'user_ip': request.remote_addr or 'unknown'}
    
    def _create_log_entry(self, 
                         event_type: str, 
                         action: str, 
                         user_info: Dict[str, Any],
                         details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)
    
    def log_user_action(self, request, action: str, **kwargs):
        """
        Log user actions with request context.
        
        Args:
            request: Flask request object
            action: Type of action (e.g. 'create_user', 'login')
            **kwargs: Additional details to log
        """
        details = {
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
            **self.sanitize(kwargs)
        }
        
        log_message = self._create_log_entry('USER_ACTION', action, self._get_user_identity(request), details)
        self.logger.info(log_message)
    
    def log_server_response(self, 
                           request, 
                           action: str,
                           status_code: int,
                           response_data: Any = None,
                           **kwargs):
        """
        Log server responses with request context.
        
        Args:
            request: Flask request object
            action: Action that was performed
            status_code: HTTP status returned to the client
            response_data: Body being returned to the client
            **kwargs: Additional details to log
        """
        success = status_code < 400
        details = {
            'status_code': status_code,
            'response_data': self.sanitize(response_data),
            **kwargs
        }
        
        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, self._get_user_identity(request), details)
        
        if success:
            self.logger.info(log_message)
        else:
            self.logger.warning(log_message)
    
    def log_error(self, request, error: Exception, action: str):
        """
        Log an unhandled error with request context.
        
        Args:
            request: Flask request object
            error: Exception that occurred
            action: Endpoint or action that was being performed
        """
        details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'method': request.method,
            'path': request.path
        }
        
        log_message = self._create_log_entry('ERROR', action, self._get_user_identity(request), details)
        self.logger.error(log_message, exc_info=error)
    
    def sanitize(self, data: Any) -> Any:
        """Mask passwords and tokens in data about to be logged."""
        if isinstance(data, dict):
            return {
                key: '***' if key in SENSITIVE_FIELDS else self.sanitize(value)
                for key, value in data.items()
            }
        if isinstance(data, list):
            return [self.sanitize(item) for item in data]
        return data


# Global logger instance
api_logger = ApiLogger(Config.LOG_DIR, Config.LOG_LEVEL)
