"""Notifications, the search log and AI writing helpers."""

import logging

from flask import Blueprint, g, jsonify

from assistant import career_suggestions, generate_about
from services import activity
from webapp.auth import current_account, get_context, login_required
from webapp.schemas import AboutRequest, CareerRequest, NotificationDelete, SearchCreate
from webapp.validation import validate_body

logger = logging.getLogger(__name__)

notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')
searches_bp = Blueprint('searches', __name__, url_prefix='/api/searches')
ai_bp = Blueprint('ai', __name__, url_prefix='/api/ai')


@notifications_bp.route('', methods=['GET'])
@notifications_bp.route('/', methods=['GET'])
@login_required('user')
def list_notifications():
    return jsonify({'success': True, 'notifications': activity.notifications(get_context(), g.account)})


@notifications_bp.route('/<notification_id>/read', methods=['PATCH'])
@login_required('user')
def mark_notification_read(notification_id: str):
    notification = activity.mark_read(get_context(), g.account, notification_id)
    return jsonify({'success': True, 'notification': notification})


@notifications_bp.route('', methods=['DELETE'])
@notifications_bp.route('/', methods=['DELETE'])
@login_required('user')
@validate_body(NotificationDelete)
def delete_notifications(body):
    notification_id = body.get('id')
    deleted = activity.clear_notifications(get_context(), g.account, notification_id)
    message = "Notification deleted" if notification_id else "All notifications cleared"
    return jsonify({'success': True, 'message': message, 'deleted': deleted})


@searches_bp.route('', methods=['POST'])
@searches_bp.route('/', methods=['POST'])
@validate_body(SearchCreate)
def store_search(body):
    activity.record_search(get_context(), body.get('query'), current_account('user'))
    return jsonify({'success': True, 'message': "Search stored successfully"}), 201


@ai_bp.route('/generate-about', methods=['POST'])
@validate_body(AboutRequest)
def generate_about_text(body):
    ctx = get_context()
    about = generate_about(ctx.text_generator, body.get('job_title'), body.get('skills'))
    return jsonify({'success': True, 'about': about})


@ai_bp.route('/career-suggestions', methods=['POST'])
@login_required('user')
@validate_body(CareerRequest)
def suggest_careers(body):
    ctx = get_context()
    suggestions = career_suggestions(ctx.text_generator, body['skills'], body['experience'])
    return jsonify({'success': True, 'suggestions': suggestions})
