from flask import Blueprint, Response, jsonify, request
from invitegate.services.subscription_service import SubscriptionService
from invitegate.middleware.auth import requires_admin
from invitegate.utils.validators import SubscribeRequest

subscribe_bp = Blueprint('subscribe', __name__)
mailing_list_bp = Blueprint('mailing_list', __name__)


@subscribe_bp.route('', methods=['POST'])
def subscribe():
    payload = SubscribeRequest.from_json(request.get_json(silent=True))
    message = SubscriptionService.handle_subscription(payload.email)
    return jsonify({'success': True, 'message': message}), 200


@mailing_list_bp.route('/subscribers', methods=['GET'])
@requires_admin
def list_subscribers():
    subscribers = SubscriptionService.list_subscribers()
    return jsonify([{
        'id': s.id,
        'email': s.email,
        'createdAt': s.created_at.isoformat(),
        'updatedAt': s.updated_at.isoformat()
    } for s in subscribers]), 200


@mailing_list_bp.route('/subscribers.csv', methods=['GET'])
@requires_admin
def export_subscribers():
    return Response(
        SubscriptionService.export_csv(),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=confirmed-subscribers.csv'}
    )
