from flask import Blueprint, jsonify, request
from invitegate.services.invite_service import InviteService
from invitegate.exceptions import NotFoundError
from invitegate.middleware.auth import current_user, requires_admin
from invitegate.utils.validators import CreateInviteRequest


invite_bp = Blueprint('invite', __name__)

@invite_bp.route('', methods=['POST'])
@requires_admin
def create_invite():
    """Create a new invite token"""
    payload = CreateInviteRequest.from_json(request.get_json(silent=True))
    invite = InviteService.create_token(
        current_user(),
        expires_in_hours=payload.expires_in_hours,
        max_uses=payload.max_uses,
        notes=payload.notes,
    )

    return jsonify({
        'message': 'Invite token created successfully',
        'invite': invite.to_dict()
    }), 201

@invite_bp.route('', methods=['GET'])
@requires_admin
def list_invites():
    """List invite tokens created by the caller"""
    invites = InviteService.list_tokens(current_user())
    return jsonify({
        'invites': [invite.to_dict() for invite in invites]
    }), 200

@invite_bp.route('/stats', methods=['GET'])
@requires_admin
def invite_stats():
    return jsonify(InviteService.get_usage_stats()), 200

@invite_bp.route('/<token>', methods=['GET'])
@requires_admin
def get_invite(token):
    invite = InviteService.get_token_details(token)
    if not invite:
        raise NotFoundError("Invite token not found", "INVITE_NOT_FOUND")
    return jsonify({'invite': invite.to_dict()}), 200

@invite_bp.route('/<token>', methods=['DELETE'])
@requires_admin
def deactivate_invite(token):
    if not InviteService.deactivate_token(token):
        raise NotFoundError("Invite token not found", "INVITE_NOT_FOUND")
    return jsonify({
        'success': True,
        'message': 'Invite token deactivated'
    }), 200
