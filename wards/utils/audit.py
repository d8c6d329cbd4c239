from wards.models import AuditLog

def log_action(action, model_name, object_id, description):
    AuditLog.objects.create(
        action=action,
        model_name=model_name,
        object_id=object_id,
        description=description
    )
