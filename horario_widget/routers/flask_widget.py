"""
Flask Widget Router
Widget host endpoints: instance registry, painted views and refresh broadcasts
"""

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
import logging

from ..core.exceptions import WidgetServiceError, ValidationError

logger = logging.getLogger(__name__)

widget_bp = Blueprint('widget', __name__)

def _runtime():
    return current_app.extensions['horario_widget']

@widget_bp.route('/instances', methods=['GET'])
def list_instances():
    """List live widget instances"""
    instance_ids = _runtime().host.get_instance_ids()
    return jsonify({
        "instances": instance_ids,
        "total_instances": len(instance_ids)
    })

@widget_bp.route('/instances', methods=['POST'])
@jwt_required(optional=True)
def add_instance():
    """Place a new widget instance on the host; it is painted immediately"""
    try:
        runtime = _runtime()
        instance_id = runtime.host.add_instance(user_id=get_jwt_identity())
        return jsonify({
            "instance_id": instance_id,
            "view": runtime.host.get_view(instance_id)
        }), 201

    except WidgetServiceError:
        raise
    except Exception as e:
        logger.error(f"Add widget instance error: {e}")
        raise WidgetServiceError(500, "Internal server error")

@widget_bp.route('/instances/<int:instance_id>', methods=['GET'])
def get_instance(instance_id):
    """Regions last painted into one widget instance"""
    return jsonify({
        "instance_id": instance_id,
        "view": _runtime().host.get_view(instance_id)
    })

@widget_bp.route('/instances/<int:instance_id>', methods=['DELETE'])
def remove_instance(instance_id):
    """Remove a widget instance from the host"""
    _runtime().host.remove_instance(instance_id)
    return jsonify({"message": f"Widget instance {instance_id} removed"})

@widget_bp.route('/refresh', methods=['POST'])
@jwt_required(optional=True)
def refresh():
    """Host refresh broadcast; optional body {"instance_ids": [...]}"""
    try:
        data = request.get_json(silent=True) or {}
        instance_ids = data.get('instance_ids') if isinstance(data, dict) else None
        if instance_ids is not None:
            if not isinstance(instance_ids, list) or not all(
                isinstance(i, int) and not isinstance(i, bool) for i in instance_ids
            ):
                raise ValidationError("instance_ids must be a list of integers", "instance_ids", instance_ids)

        runtime = _runtime()
        rendered = runtime.provider.on_refresh_requested(instance_ids, user_id=get_jwt_identity())

        return jsonify({
            "refreshed": rendered is not None,
            "instances": instance_ids if instance_ids is not None else runtime.host.get_instance_ids(),
            "rendered": rendered.model_dump() if rendered is not None else None
        })

    except WidgetServiceError:
        raise
    except Exception as e:
        logger.error(f"Widget refresh error: {e}")
        raise WidgetServiceError(500, "Internal server error")
