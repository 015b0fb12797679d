import logging

from django.db import transaction

from main.services import ActionFlag, LogAction

from ..estados import MAQUINA_SUPLETORIO
from ..exceptions import AcademicoException, PrecondicionError
from ..models import EstadoPromedioAnual, EstadoSupletorio, PeriodoLectivo, PromedioPeriodo
from .promedios import ServiciosPromedios

logger = logging.getLogger(__name__)


class ServiciosSupletorio:
    @staticmethod
    def obtener_promedios_supletorio(periodo):
        return PromedioPeriodo.objects.filter(
            periodo=periodo, en_supletorio=True
        ).select_related('estudiante', 'materia_curso__materia', 'materia_curso__curso')

    @staticmethod
    def resumen_supletorios(periodo):
        promedios = ServiciosSupletorio.obtener_promedios_supletorio(periodo)
        rindieron = promedios.filter(nota_supletorio__isnull=False)
        return {
            'total_estudiantes_en_supletorio': promedios.count(),
            'estudiantes_que_rindieron': rindieron.count(),
            'estudiantes_que_no_rindieron': promedios.filter(nota_supletorio__isnull=True).count(),
            'estudiantes_que_aprobaron': rindieron.filter(estado=EstadoPromedioAnual.APROBADO).count(),
            'estudiantes_que_reprobaron': rindieron.filter(estado=EstadoPromedioAnual.REPROBADO).count(),
        }

    @staticmethod
    def cambiar_estado_supletorio(periodo, nuevo_estado, usuario=None):
        """
        Cambia el estado de supletorios del período.

        Al activar desde PENDIENTE se recalculan todos los promedios anuales y se marcan
        los estudiantes que deben rendir supletorio. Cerrar, reabrir o regresar a
        PENDIENTE nunca borra las notas de supletorio registradas.

        Returns:
            dict con estadísticas

        Raises:
            TransicionInvalidaError para PENDIENTE→CERRADO, CERRADO→PENDIENTE o el mismo estado
            PrecondicionError si el período no está activo
        """
        with transaction.atomic():
            periodo = PeriodoLectivo.objects.select_for_update().get(pk=periodo.pk)
            anterior = periodo.estado_supletorio
            MAQUINA_SUPLETORIO.validar(anterior, nuevo_estado)
            if not periodo.esta_activo:
                raise PrecondicionError(
                    f"El período {periodo.nombre} no está activo; no se pueden gestionar supletorios.",
                    errores=[{'periodo_id': periodo.pk, 'estado': periodo.estado}]
                )

            estadisticas = {'estado_anterior': anterior, 'estado_nuevo': str(nuevo_estado)}
            if anterior == EstadoSupletorio.PENDIENTE and nuevo_estado == EstadoSupletorio.ACTIVADO:
                estadisticas.update(ServiciosPromedios.generar_promedios_periodo(periodo))
            elif nuevo_estado == EstadoSupletorio.CERRADO:
                estadisticas.update(ServiciosSupletorio.resumen_supletorios(periodo))

            periodo.estado_supletorio = nuevo_estado
            periodo.save(update_fields=['estado_supletorio', 'fecha_actualizacion'])

        logger.info("Supletorios del período %s: %s -> %s", periodo.pk, anterior, nuevo_estado)
        if usuario:
            LogAction(
                usuario, periodo, ActionFlag.CHANGE,
                f"Supletorios: {anterior} -> {nuevo_estado}"
            ).log()
        return estadisticas

    @staticmethod
    def transicionar_supletorio(periodo, nuevo_estado, usuario=None):
        """
        Igual que cambiar_estado_supletorio pero responde con un dict:
        ``{'ok': True, 'estadisticas': ...}`` o ``{'ok': False, 'reason': ...}``.
        """
        try:
            estadisticas = ServiciosSupletorio.cambiar_estado_supletorio(periodo, nuevo_estado, usuario)
        except AcademicoException as e:
            logger.warning("Cambio de supletorios rechazado en período %s: %s", periodo.pk, e.mensaje)
            return e.como_dict()
        return {'ok': True, 'estadisticas': estadisticas}
