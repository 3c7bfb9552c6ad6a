"""Application routes for job seekers and for the companies reviewing them."""

import logging

from flask import Blueprint, g, jsonify

from services import applications
from webapp.auth import get_context, login_required
from webapp.schemas import ApplicationCreate, StatusUpdate
from webapp.validation import validate_body

logger = logging.getLogger(__name__)

applications_bp = Blueprint('applications', __name__, url_prefix='/api/applications')
company_applications_bp = Blueprint('company_applications', __name__, url_prefix='/api/company/applications')


@applications_bp.route('', methods=['POST'])
@applications_bp.route('/', methods=['POST'])
@login_required('user')
@validate_body(ApplicationCreate)
def submit_application(body):
    application = applications.submit_application(
        get_context(), g.account, body['job_id'], body.get('cover_letter'),
    )
    return jsonify({
        'success': True,
        'message': "Application submitted successfully",
        'application': application,
    }), 201


@applications_bp.route('/my', methods=['GET'])
@login_required('user')
def my_applications():
    return jsonify({'success': True, 'applications': applications.my_applications(get_context(), g.account)})


@applications_bp.route('/my/<job_id>', methods=['GET'])
@login_required('user')
def my_application_for_job(job_id: str):
    application = applications.my_application_for_job(get_context(), g.account, job_id)
    return jsonify({'success': True, 'application': application})


@applications_bp.route('/applied', methods=['GET'])
@login_required('user')
def applied_jobs():
    result = applications.applied_jobs(get_context(), g.account)
    return jsonify({'success': True, 'count': len(result), 'jobs': result})


@company_applications_bp.route('/all', methods=['GET'])
@login_required('company')
def all_company_applications():
    result = applications.company_applications(get_context(), g.account)
    return jsonify({'success': True, 'applications': result})


@company_applications_bp.route('/<job_id>', methods=['GET'])
@login_required('company')
def job_applications(job_id: str):
    result = applications.job_applications(get_context(), g.account, job_id)
    return jsonify({'success': True, 'applications': result})


@company_applications_bp.route('/<application_id>/status', methods=['PUT'])
@login_required('company')
@validate_body(StatusUpdate)
def decide_application(application_id: str, body):
    application = applications.decide_application(get_context(), g.account, application_id, body.get('status'))
    return jsonify({
        'success': True,
        'message': f"Application {application['status']} successfully",
        'application': application,
    })
