"""
Request Decorators

Pre-handler steps for the HTTP endpoints: JSON content-type enforcement,
bearer authentication and loading the user named in the URL path.
"""

from functools import wraps

from bson.objectid import ObjectId
from flask import Response, current_app, g, jsonify, request


def user_not_found(user_id) -> Response:
    """404 response naming the requested user ID, identical for malformed and unknown IDs."""
    return Response(f"No user found with ID {user_id}", status=404, mimetype='text/plain')


def require_json(f):
    """
    Decorator rejecting requests whose body is not declared as JSON.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not request.is_json:
            return jsonify({'message': 'This resource only has an application/json representation'}), 415
        return f(*args, **kwargs)
    
    return decorated_function


def require_auth(f):
    """
    Decorator to require authentication for protected HTTP endpoints.
    
    The check itself is the application's ``authenticate`` callable, which
    returns a principal for the request or None.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        authenticate = current_app.extensions.get('authenticate')
        principal = authenticate(request) if authenticate else None
        if principal is None:
            return '', 401
        
        # Add principal to request context
        g.principal = principal
        return f(*args, **kwargs)
    
    return decorated_function


def load_user_from_params(f):
    """
    Decorator loading the user whose ID is the ``user_id`` path parameter into ``g.user``.
    
    Responds with 404 if the ID is not a valid ObjectId or no such user exists.
    Store errors propagate.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.user_service import get_user_service
        
        user_id = kwargs.get('user_id')
        if not ObjectId.is_valid(user_id):
            return user_not_found(user_id)
        
        user = get_user_service().find_by_id(user_id)
        if user is None:
            return user_not_found(user_id)
        
        g.user = user
        return f(*args, **kwargs)
    
    return decorated_function
