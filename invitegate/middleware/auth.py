from functools import wraps
from flask import current_app, g, request
from invitegate.exceptions import AuthenticationError, AuthorizationError
from invitegate.services.auth_service import ACCESS, REFRESH, AuthService
from invitegate.utils.logger import get_logger

logger = get_logger(__name__)


# endpoints reachable without a session token
PUBLIC_ENDPOINTS = frozenset({
    'auth.login',
    'auth.register',
    'subscribe.subscribe',
    'health',
    'static',
})

# endpoints that take a refresh token instead of an access token
REFRESH_ENDPOINTS = frozenset({
    'auth.refresh',
})


def get_auth_service() -> AuthService:
    return current_app.extensions['auth_service']


def extract_bearer_token() -> str:
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        raise AuthenticationError("Token is missing", "TOKEN_MISSING")

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != 'bearer' or not parts[1]:
        raise AuthenticationError("Invalid token format", "INVALID_TOKEN_FORMAT")
    return parts[1]


def verify_session():
    """
    before_request hook: every endpoint outside PUBLIC_ENDPOINTS needs a
    valid bearer token for an existing, active user.
    """
    endpoint = request.endpoint
    # unknown routes fall through to the 404 handler
    if endpoint is None or endpoint in PUBLIC_ENDPOINTS:
        return None

    expected_type = REFRESH if endpoint in REFRESH_ENDPOINTS else ACCESS
    auth_service = get_auth_service()

    try:
        token = extract_bearer_token()
        payload = auth_service.verify_token(token, expected_type)
    except AuthenticationError as e:
        logger.warning("Authentication failed for %s: %s", request.remote_addr, e.message)
        raise

    user = auth_service.find_user_by_id(payload.get('sub'))
    if user is None:
        logger.warning("Authentication failed for %s: unknown subject", request.remote_addr)
        raise AuthenticationError("Authentication failed", "USER_NOT_FOUND")

    if not user.is_active:
        raise AuthenticationError("Account is deactivated", "ACCOUNT_DEACTIVATED")

    logger.debug("User %s authenticated successfully", user.id)
    g.current_user = user
    g.token_payload = payload
    return None


def current_user():
    user = getattr(g, 'current_user', None)
    if user is None:
        raise AuthenticationError("Authentication required", "AUTH_REQUIRED")
    return user


def requires_admin(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        user = current_user()
        if not user.is_admin:
            raise AuthorizationError("Admin access required", "INSUFFICIENT_ROLE")
        return f(*args, **kwargs)
    return decorated
