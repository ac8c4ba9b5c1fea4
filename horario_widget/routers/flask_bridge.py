"""
Flask Bridge Router
HTTP rendition of the app bridge channel: one POST per named command
"""

from flask import Blueprint, request, jsonify, current_app
from http import HTTPStatus
import logging

logger = logging.getLogger(__name__)

bridge_bp = Blueprint('bridge', __name__)

@bridge_bp.route('/<method>', methods=['POST'])
def call_method(method):
    """Invoke a bridge command; the JSON body (if any) is its arguments"""
    runtime = current_app.extensions['horario_widget']
    arguments = request.get_json(silent=True)

    result = runtime.bridge.handle(method, arguments)

    if result.ok:
        status = HTTPStatus.OK
    elif result.is_not_implemented:
        status = HTTPStatus.NOT_IMPLEMENTED
    else:
        status = HTTPStatus.BAD_REQUEST
    return jsonify(result.model_dump()), status

@bridge_bp.route('/', methods=['GET'])
def list_methods():
    """List the commands the bridge understands"""
    runtime = current_app.extensions['horario_widget']
    return jsonify({
        "channel": runtime.settings.WIDGET_CHANNEL,
        "methods": runtime.bridge.methods
    })
