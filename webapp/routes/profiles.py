"""Profile routes: job seeker profile and uploads, company profile, public company pages."""

import logging

from flask import Blueprint, g, jsonify, request

from services import activity, profiles
from webapp.auth import get_context, login_required
from webapp.schemas import CompanyProfileUpdate, UserProfileUpdate
from webapp.validation import query_arg, validate_body

logger = logging.getLogger(__name__)

user_bp = Blueprint('user', __name__, url_prefix='/api/user')
company_profile_bp = Blueprint('company_profile', __name__, url_prefix='/api/company/profile')
company_dashboard_bp = Blueprint('company_dashboard', __name__, url_prefix='/api/company/dashboard')
companies_bp = Blueprint('companies', __name__)

DASHBOARD_INTERVALS = ('hours', 'months', 'years')


# ---------------------------------------------------------------------------
# Job seeker profile
# ---------------------------------------------------------------------------

@user_bp.route('/overview', methods=['GET'])
def overview():
    return jsonify({'success': True, **profiles.overview(get_context())})


@user_bp.route('/profile', methods=['GET'])
@login_required('user')
def get_profile():
    return jsonify({'success': True, 'profile': profiles.get_profile(get_context(), g.account)})


@user_bp.route('/profile', methods=['PUT'])
@login_required('user')
@validate_body(UserProfileUpdate)
def update_profile(body):
    profile = profiles.update_profile(get_context(), g.account, body)
    return jsonify({'success': True, 'message': "Profile updated successfully", 'profile': profile})


@user_bp.route('/profile/<user_id>', methods=['GET'])
def public_profile(user_id: str):
    return jsonify({'success': True, 'profile': profiles.public_profile(get_context(), user_id)})


@user_bp.route('/profile/upload-photo', methods=['POST'])
@login_required('user')
def upload_photo():
    result = profiles.upload_photo(get_context(), g.account, request.files.get('profilePhoto'))
    return jsonify({'success': True, 'message': "Profile photo uploaded successfully", **result})


@user_bp.route('/profile/upload-resume', methods=['POST'])
@login_required('user')
def upload_resume():
    result = profiles.upload_resume(get_context(), g.account, request.files.get('resume'))
    return jsonify({'success': True, 'message': "Resume uploaded successfully", **result})


@user_bp.route('/profile/resume', methods=['DELETE'])
@login_required('user')
def remove_resume():
    result = profiles.remove_resume(get_context(), g.account)
    return jsonify({'success': True, 'message': "Resume removed successfully", **result})


@user_bp.route('/profile/upload-certificate', methods=['POST'])
@login_required('user')
def upload_certificate():
    certificate = profiles.upload_certificate(
        get_context(), g.account, request.files.get('certificate'), request.form.get('title'),
    )
    return jsonify({'success': True, 'message': "Certificate uploaded successfully", 'certificate': certificate}), 201


@user_bp.route('/profile/certificate/<certificate_id>', methods=['DELETE'])
@login_required('user')
def delete_certificate(certificate_id: str):
    profiles.delete_certificate(get_context(), g.account, certificate_id)
    return jsonify({'success': True, 'message': "Certificate deleted successfully"})


@user_bp.route('/profile/upload-video-intro', methods=['POST'])
@login_required('user')
def upload_video():
    result = profiles.upload_video(get_context(), g.account, request.files.get('videoIntro'))
    return jsonify({'success': True, 'message': "Video uploaded successfully", **result})


@user_bp.route('/profile/video-intro', methods=['DELETE'])
@login_required('user')
def delete_video():
    profiles.delete_video(get_context(), g.account)
    return jsonify({'success': True, 'message': "Video introduction deleted"})


@user_bp.route('/analytics', methods=['GET'])
@login_required('user')
def analytics():
    return jsonify({'success': True, **profiles.analytics(get_context(), g.account)})


# Saved jobs

@user_bp.route('/save-job/<job_id>', methods=['POST'])
@login_required('user')
def save_job(job_id: str):
    activity.save_job_for_user(get_context(), g.account, job_id)
    return jsonify({'success': True, 'message': "Job saved successfully."}), 201


@user_bp.route('/remove-job/<job_id>', methods=['DELETE'])
@login_required('user')
def remove_saved_job(job_id: str):
    activity.remove_job_for_user(get_context(), g.account, job_id)
    return jsonify({'success': True, 'message': "Job removed from saved jobs."})


@user_bp.route('/saved-jobs', methods=['GET'])
@login_required('user')
def saved_jobs():
    result = activity.saved_jobs(get_context(), g.account)
    return jsonify({'success': True, 'count': len(result), 'jobs': result})


# ---------------------------------------------------------------------------
# Company profile and dashboard
# ---------------------------------------------------------------------------

@company_profile_bp.route('', methods=['GET'])
@company_profile_bp.route('/', methods=['GET'])
@login_required('company')
def get_company_profile():
    return jsonify({'success': True, 'profile': profiles.get_company_profile_view(get_context(), g.account)})


@company_profile_bp.route('', methods=['PUT'])
@company_profile_bp.route('/', methods=['PUT'])
@login_required('company')
@validate_body(CompanyProfileUpdate)
def update_company_profile(body):
    profile = profiles.update_company_profile_view(get_context(), g.account, body)
    return jsonify({'success': True, 'message': "Profile updated successfully", 'profile': profile})


@company_profile_bp.route('/logo', methods=['POST'])
@login_required('company')
def upload_logo():
    result = profiles.upload_logo(get_context(), g.account, request.files.get('logo'))
    return jsonify({'success': True, 'message': "Logo uploaded successfully", **result})


@company_dashboard_bp.route('/overview', methods=['GET'])
@login_required('company')
def dashboard_overview():
    interval = query_arg('interval', 'months')
    if interval not in DASHBOARD_INTERVALS:
        interval = 'months'
    return jsonify({'success': True, **profiles.company_dashboard(get_context(), g.account, interval)})


# ---------------------------------------------------------------------------
# Public company pages
# ---------------------------------------------------------------------------

@companies_bp.route('/api/companies', methods=['GET'])
@companies_bp.route('/api/companies/', methods=['GET'])
def list_companies():
    return jsonify({'success': True, 'companies': profiles.list_companies(get_context())})


@companies_bp.route('/api/companies/<profile_id>', methods=['GET'])
def company_details(profile_id: str):
    return jsonify({'success': True, 'company': profiles.company_by_id(get_context(), profile_id)})


@companies_bp.route('/api/company-profiles/oldest', methods=['GET'])
def oldest_companies():
    return jsonify({'success': True, 'companies': profiles.oldest_companies(get_context())})
