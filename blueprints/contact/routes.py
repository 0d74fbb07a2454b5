"""
Contact Routes - Contact form API
Handles: Contact message submission
"""

from flask import current_app, jsonify, request

from utils.contact import submit
from utils.notifications import notify_new_contact
from utils.security import get_client_ip
from . import contact_bp


def get_contact_storage():
    """Storage collaborator registered by the application factory"""
    return current_app.extensions['contact_storage']


@contact_bp.route('/contact', methods=['POST'])
def create_contact():
    """Validate and store a contact form submission"""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}

    result = submit(payload, get_contact_storage())

    if result.success:
        stored = result.stored
        current_app.logger.info(
            f"Contact message {stored.get('id')} saved from {get_client_ip()}")
        try:
            notify_new_contact(stored)
        except Exception as e:
            current_app.logger.error(f"Owner notification failed: {str(e)}")
    elif result.status_code == 400:
        current_app.logger.info(f"Rejected contact submission: {result.body['message']}")

    return jsonify(result.body), result.status_code
