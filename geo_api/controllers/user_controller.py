"""
User Controller

Handles the user resource HTTP endpoints: CRUD, score listing,
registration and login.
"""

from bson.objectid import ObjectId
from flask import Blueprint, g, jsonify, request, url_for

from ..services.credential_service import MAX_PASSWORD_BYTES, get_credential_service
from ..services.user_service import get_user_service
from ..utils.api_logger import api_logger
from ..utils.decorators import load_user_from_params, require_auth, require_json, user_not_found
from ..utils.errors import ValidationError
from ..utils.pagination import add_link_header, get_pagination_parameters

users_bp = Blueprint('users', __name__)


def _get_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        if request.is_json:
            raise ValidationError('Request body must be valid JSON')
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _check_password_length(password: str):
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationError(f'Password must be at most {MAX_PASSWORD_BYTES} bytes long')


def _require_credentials(data: dict):
    """Return (username, password) from the body, both required non-empty strings."""
    username = data.get('username')
    password = data.get('password')
    if not isinstance(username, str) or not username:
        raise ValidationError('Username is required')
    if not isinstance(password, str) or not password:
        raise ValidationError('Password is required')
    _check_password_length(password)
    return username, password


@users_bp.route('/', methods=['POST'])
def create_user():
    """Create a user from the request body."""
    data = _get_body()
    api_logger.log_user_action(request, 'create_user', body=data)
    
    username, password = _require_credentials(data)
    hashed_password = get_credential_service().hash_password(password)
    user = get_user_service().create_user(username, hashed_password)
    
    response_data = user.to_public_dict()
    api_logger.log_server_response(request, 'create_user', 201, response_data)
    
    response = jsonify(response_data)
    response.status_code = 201
    response.headers['Location'] = url_for('users.get_user', user_id=user.id, _external=True)
    return response


@users_bp.route('/', methods=['GET'])
def list_users():
    """List users with their aggregated scores, one page at a time."""
    user_service = get_user_service()
    usernames = request.args.getlist('username')
    
    total = user_service.count_users(usernames)
    page, page_size = get_pagination_parameters(request.args)
    
    api_logger.log_user_action(request, 'list_users', page=page, page_size=page_size)
    
    users = user_service.list_user_scores(page, page_size, usernames)
    response_data = [user.to_public_dict() for user in users]
    
    response = jsonify(response_data)
    extra_params = {'username': usernames} if usernames else None
    add_link_header(response, url_for('users.list_users', _external=True),
                    page, page_size, total, extra_params)
    
    api_logger.log_server_response(request, 'list_users', 200, total=total, returned=len(response_data))
    return response


@users_bp.route('/<user_id>', methods=['GET'])
@load_user_from_params
def get_user(user_id):
    """Retrieve one user."""
    return jsonify(g.user.to_public_dict())


@users_bp.route('/<user_id>', methods=['PATCH'])
@require_json
@load_user_from_params
def update_user(user_id):
    """Partially update a user's username and/or password."""
    data = _get_body()
    api_logger.log_user_action(request, 'update_user', user_id=user_id, body=data)
    
    changes = {}
    if 'username' in data:
        if not isinstance(data['username'], str):
            raise ValidationError('Username must be a string')
        changes['username'] = data['username']
    if 'password' in data:
        if not isinstance(data['password'], str):
            raise ValidationError('Password must be a string')
        _check_password_length(data['password'])
        changes['password'] = get_credential_service().hash_password(data['password'])
    
    user = get_user_service().update_user(g.user.id, changes)
    if user is None:
        return user_not_found(user_id)
    
    api_logger.logger.debug(f'Updated user "{user.username}"')
    response_data = user.to_public_dict()
    api_logger.log_server_response(request, 'update_user', 200, response_data)
    return jsonify(response_data)


@users_bp.route('/<user_id>', methods=['DELETE'])
@load_user_from_params
@require_auth
def delete_user(user_id):
    """Permanently delete a user. Their guesses are kept."""
    api_logger.log_user_action(request, 'delete_user', user_id=user_id, principal=g.principal.get('id'))
    
    get_user_service().delete_user(g.user.id)
    
    api_logger.logger.debug(f'Deleted user "{g.user.username}"')
    api_logger.log_server_response(request, 'delete_user', 204)
    return '', 204


@users_bp.route('/register', methods=['POST'])
def register():
    """Register a new user if the username is free."""
    data = _get_body()
    api_logger.log_user_action(request, 'register', body=data)
    
    username, password = _require_credentials(data)
    user_service = get_user_service()
    
    if user_service.count_by_username(username) >= 1:
        response_data = {'message': 'Username already exists'}
        api_logger.log_server_response(request, 'register', 409, response_data)
        return jsonify(response_data), 409
    
    hashed_password = get_credential_service().hash_password(password)
    user = user_service.create_user(username, hashed_password, user_id=ObjectId())
    
    api_logger.logger.debug(f'User "{user.username}" created')
    response_data = user.to_public_dict()
    api_logger.log_server_response(request, 'register', 200, response_data)
    return jsonify(response_data)


@users_bp.route('/login', methods=['POST'])
def login():
    """Authenticate a user and return a bearer token."""
    data = _get_body()
    username = data.get('username')
    password = data.get('password')
    
    api_logger.log_user_action(request, 'login', username=username)
    
    credential_service = get_credential_service()
    user = get_user_service().find_by_username(username) if isinstance(username, str) else None
    
    if user is None or not credential_service.verify_password(password, user.password):
        api_logger.log_server_response(request, 'login', 401)
        return '', 401
    
    token = credential_service.issue_token(user.id)
    # Don't log the token
    api_logger.log_server_response(request, 'login', 200, user_id=user.id)
    return jsonify({'token': token})
