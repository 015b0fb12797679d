from enum import Enum

from django.contrib.admin.models import LogEntry


class ActionFlag(Enum):
    ADDITION = 1
    CHANGE = 2
    DELETION = 3


class LogAction:
    """
    Registra en el historial del admin (LogEntry) las acciones hechas por los
    servicios académicos, p. ej. finalizar un trimestre o cerrar un período.
    """

    def __init__(self, user, model_instance_or_queryset, action: ActionFlag, change_message: str):
        self.user = user
        self.target = model_instance_or_queryset
        self.action = action
        self.change_message = change_message

    def log(self):
        if self.user is None or not self.user.pk:
            return []

        if not hasattr(self.target, '__iter__') or isinstance(self.target, dict):
            objetos = [self.target]
        else:
            objetos = list(self.target)

        if not objetos:
            return []

        return LogEntry.objects.log_actions(
            user_id=self.user.pk,
            queryset=objetos,
            action_flag=self.action.value,
            change_message=self.change_message,
            single_object=len(objetos) == 1
        )
