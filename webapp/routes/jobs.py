"""Job posting routes: public listings plus company-owned changes."""

import logging

from flask import Blueprint, g, jsonify

from services import jobs
from webapp.auth import get_context, login_required
from webapp.schemas import JobCreate, JobUpdate, StatusUpdate
from webapp.validation import query_args, validate_body

logger = logging.getLogger(__name__)

jobs_bp = Blueprint('jobs', __name__, url_prefix='/api/jobs')

LISTING_FILTERS = ('search', 'location', 'date_posted', 'experience', 'remote', 'job_type', 'industry')


@jobs_bp.route('', methods=['POST'])
@jobs_bp.route('/', methods=['POST'])
@login_required('company')
@validate_body(JobCreate)
def create_job(body):
    job = jobs.create_job(get_context(), g.account, body)
    return jsonify({'success': True, 'message': "Job created successfully", 'job': job}), 201


@jobs_bp.route('', methods=['GET'])
@jobs_bp.route('/', methods=['GET'])
def list_jobs():
    """Public job listing with optional filters."""
    result = jobs.list_jobs(get_context(), query_args(*LISTING_FILTERS))
    return jsonify({'success': True, 'count': len(result), 'jobs': result})


@jobs_bp.route('/recommended', methods=['GET'])
@login_required('user')
def recommended_jobs():
    result = jobs.recommended_jobs(get_context(), g.account)
    return jsonify({'success': True, 'count': len(result), 'jobs': result})


@jobs_bp.route('/categories', methods=['GET'])
def job_categories():
    return jsonify({'success': True, 'categories': jobs.job_categories(get_context())})


@jobs_bp.route('/posted', methods=['GET'])
@login_required('company')
def posted_jobs():
    result = jobs.posted_jobs(get_context(), g.account)
    return jsonify({'success': True, 'count': len(result), 'jobs': result})


@jobs_bp.route('/company/jobs/<profile_id>', methods=['GET'])
def company_jobs(profile_id: str):
    result = jobs.jobs_by_company_profile(get_context(), profile_id)
    return jsonify({'success': True, 'count': len(result), 'jobs': result})


@jobs_bp.route('/<job_id>', methods=['GET'])
def job_details(job_id: str):
    return jsonify({'success': True, 'job': jobs.job_details(get_context(), job_id)})


@jobs_bp.route('/<job_id>/applicants', methods=['GET'])
@login_required('company')
def job_applicants(job_id: str):
    applicants = jobs.job_applicants(get_context(), g.account, job_id)
    return jsonify({'success': True, 'applicants': applicants})


@jobs_bp.route('/<job_id>', methods=['PUT'])
@login_required('company')
@validate_body(JobUpdate, partial=True)
def update_job(job_id: str, body):
    job = jobs.update_job(get_context(), g.account, job_id, body)
    return jsonify({'success': True, 'message': "Job updated successfully", 'job': job})


@jobs_bp.route('/<job_id>', methods=['DELETE'])
@login_required('company')
def delete_job(job_id: str):
    jobs.delete_job(get_context(), g.account, job_id)
    return jsonify({'success': True, 'message': "Job deleted successfully"})


@jobs_bp.route('/<job_id>/status', methods=['PATCH'])
@login_required('company')
@validate_body(StatusUpdate)
def update_job_status(job_id: str, body):
    job = jobs.set_job_status(get_context(), g.account, job_id, body.get('status'))
    return jsonify({'success': True, 'message': f"Job status updated to {job['status']}", 'job': job})
