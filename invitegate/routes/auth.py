from flask import Blueprint, request, jsonify
from invitegate.middleware.auth import current_user, get_auth_service
from invitegate.services.user_service import UserService
from invitegate.exceptions import AuthenticationError, ServiceException, ValidationError
from invitegate.utils.logger import get_logger
from invitegate.utils.validators import LoginRequest, RegisterRequest

auth_bp = Blueprint('auth', __name__)
logger = get_logger(__name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    try:
        payload = RegisterRequest.from_json(request.get_json(silent=True))
        user = UserService.register(
            payload.email, payload.password, payload.token, get_auth_service()
        )

        return jsonify({
            'success': True,
            'message': 'Account created successfully',
            'user': {
                'id': str(user.id),
                'email': user.email
            }
        }), 201

    except ServiceException:
        raise
    except Exception:
        logger.exception("Registration failed")
        raise ValidationError("Registration failed. Please try again.", "REGISTRATION_FAILED")

@auth_bp.route('/login', methods=['POST'])
def login():
    try:
        payload = LoginRequest.from_json(request.get_json(silent=True))
        auth_service = get_auth_service()

        user = auth_service.validate_user(payload.email, payload.password)
        if not user:
            logger.warning("Login failed from %s", request.remote_addr)
            raise AuthenticationError("Invalid email or password", "INVALID_CREDENTIALS")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated", "ACCOUNT_DEACTIVATED")

        tokens = auth_service.login(user)
        return jsonify({
            'success': True,
            **tokens,
            'user': {
                'id': str(user.id),
                'email': user.email
            }
        }), 200

    except ServiceException:
        raise
    except Exception:
        logger.exception("Login failed")
        raise ValidationError("Login failed. Please try again.", "LOGIN_FAILED")

@auth_bp.route('/verify', methods=['POST'])
def verify():
    user = current_user()
    return jsonify({
        'valid': True,
        'user': {
            'id': str(user.id),
            'email': user.email,
            'isActive': user.is_active,
            'emailVerified': user.email_verified
        }
    }), 200

@auth_bp.route('/refresh', methods=['POST'])
def refresh():
    user = current_user()
    result = get_auth_service().refresh_token(user)
    return jsonify({
        'success': True,
        **result
    }), 200

@auth_bp.route('/logout', methods=['POST'])
def logout():
    user = current_user()
    get_auth_service().logout(str(user.id))
    return jsonify({
        'success': True,
        'message': 'Logged out successfully'
    }), 200
