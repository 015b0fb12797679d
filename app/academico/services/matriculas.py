import logging

from django.db import transaction
from django.utils import timezone

from main.services import ActionFlag, LogAction

from ..estados import MAQUINA_MATRICULA
from ..exceptions import PrecondicionError
from ..models import EstadoEstudiante, EstadoMatricula, Matricula

logger = logging.getLogger(__name__)


class ServiciosMatricula:
    @staticmethod
    def retirar_matricula(matricula, motivo, usuario=None):
        """Retira la matrícula activa; el estudiante queda RETIRADO. El motivo es obligatorio."""
        if not motivo or not motivo.strip():
            raise PrecondicionError(
                "Debe indicar el motivo del retiro.",
                errores=[{'matricula_id': matricula.pk}]
            )

        with transaction.atomic():
            matricula = Matricula.objects.select_for_update().select_related('estudiante').get(pk=matricula.pk)
            MAQUINA_MATRICULA.validar(matricula.estado, EstadoMatricula.RETIRADO)
            matricula.estado = EstadoMatricula.RETIRADO
            matricula.fecha_retiro = timezone.now()
            matricula.motivo_retiro = motivo.strip()
            matricula.save(update_fields=['estado', 'fecha_retiro', 'motivo_retiro'])

            estudiante = matricula.estudiante
            estudiante.estado = EstadoEstudiante.RETIRADO
            estudiante.save(update_fields=['estado'])

        logger.info("Matrícula %s retirada", matricula.pk)
        if usuario:
            LogAction(usuario, matricula, ActionFlag.CHANGE, f"Matrícula retirada: {motivo}").log()
        return matricula
