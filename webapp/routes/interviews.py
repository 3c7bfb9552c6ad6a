"""Interview scheduling routes for companies."""

from flask import Blueprint, g, jsonify

from services import interviews
from webapp.auth import get_context, login_required
from webapp.schemas import InterviewCreate
from webapp.validation import validate_body

interviews_bp = Blueprint('interviews', __name__, url_prefix='/api/company/interviews')


@interviews_bp.route('', methods=['POST'])
@interviews_bp.route('/', methods=['POST'])
@login_required('company')
@validate_body(InterviewCreate)
def schedule_interview(body):
    interview, is_reschedule = interviews.schedule_interview(
        get_context(), g.account,
        body['job_id'], body['user_id'], body['application_id'], body['date'], body.get('notes'),
    )
    message = "Interview rescheduled successfully" if is_reschedule else "Interview scheduled successfully"
    return jsonify({'success': True, 'message': message, 'interview': interview, 'is_reschedule': is_reschedule}), 201


@interviews_bp.route('/job/<job_id>', methods=['GET'])
@login_required('company')
def job_interviews(job_id: str):
    return jsonify({'success': True, 'interviews': interviews.interviews_for_job(get_context(), g.account, job_id)})


@interviews_bp.route('/<interview_id>', methods=['DELETE'])
@login_required('company')
def cancel_interview(interview_id: str):
    interviews.cancel_interview(get_context(), g.account, interview_id)
    return jsonify({'success': True, 'message': "Interview cancelled and candidate notified."})
