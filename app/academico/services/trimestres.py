import logging

from django.db import transaction

from main.services import ActionFlag, LogAction

from .. import calculos
from ..estados import MAQUINA_TRIMESTRE
from ..exceptions import PrecondicionError
from ..models import (
    CalificacionCualitativa,
    EstadoInsumo,
    EstadoTrimestre,
    Insumo,
    PeriodoLectivo,
    Trimestre,
)
from .promedios import ServiciosPromedios

logger = logging.getLogger(__name__)


class ResultadoCierreTrimestre:
    """Foto de la completitud de notas de un trimestre en un momento dado."""

    def __init__(self, trimestre, problemas, estadisticas, preview_generacion=0):
        self.trimestre = trimestre
        self.problemas = problemas
        self.problemas_por_docente = calculos.agrupar_problemas_por_docente(problemas)
        self.estadisticas = estadisticas
        self.preview_generacion = preview_generacion

    @property
    def ok(self):
        return not self.problemas

    def como_dict(self):
        return {
            'ok': self.ok,
            'trimestre_id': self.trimestre.pk,
            'problemas_por_docente': self.problemas_por_docente,
            'estadisticas': self.estadisticas,
            'preview_generacion': {'total_promedios_a_generar': self.preview_generacion},
        }


class ServiciosTrimestre:
    @staticmethod
    def validar_cierre_trimestre(trimestre):
        """
        Revisa que cada estudiante matriculado tenga notas completas en cada materia
        activa del período. Solo lee; puede llamarse las veces que sea necesario.

        Una materia cuantitativa está completa si se puede calcular la nota final del
        trimestre; una cualitativa, si tiene la calificación registrada.

        Returns:
            ResultadoCierreTrimestre

        Raises:
            ConfiguracionPesosError si los porcentajes del período no suman 100
        """
        pesos = ServiciosPromedios.obtener_pesos(trimestre.periodo)
        problemas = []
        estudiantes = set()
        estudiantes_incompletos = set()
        a_generar = 0

        for materia_curso in ServiciosPromedios.obtener_materias_curso(trimestre.periodo):
            docente = materia_curso.docente
            cualitativas = set()
            if not materia_curso.es_cuantitativa:
                cualitativas = set(
                    CalificacionCualitativa.objects.filter(
                        materia_curso=materia_curso,
                        trimestre=trimestre,
                        calificacion__isnull=False,
                    ).values_list('estudiante_id', flat=True)
                )

            for estudiante in ServiciosPromedios.obtener_estudiantes(materia_curso):
                estudiantes.add(estudiante.pk)
                if materia_curso.es_cuantitativa:
                    resultado = ServiciosPromedios.calcular_resultado(
                        estudiante, materia_curso, trimestre, pesos
                    )
                    if resultado.completo:
                        a_generar += 1
                        continue
                    faltantes = resultado.componentes_faltantes
                elif estudiante.pk in cualitativas:
                    continue
                else:
                    faltantes = []

                estudiantes_incompletos.add(estudiante.pk)
                problemas.append({
                    'docente_id': docente.pk if docente else None,
                    'docente_nombre': docente.nombre_completo if docente else None,
                    'materia_curso_id': materia_curso.pk,
                    'materia': materia_curso.materia.nombre,
                    'curso': str(materia_curso.curso),
                    'estudiante_id': estudiante.pk,
                    'estudiante': estudiante.nombre_completo,
                    'componentes_faltantes': faltantes,
                    'descripcion': calculos.describir_problema(
                        estudiante.nombre_completo,
                        materia_curso.materia.nombre,
                        materia_curso.curso,
                        faltantes,
                    ),
                })

        total = len(estudiantes)
        completos = total - len(estudiantes_incompletos)
        estadisticas = {
            'total_estudiantes': total,
            'estudiantes_completos': completos,
            'estudiantes_incompletos': len(estudiantes_incompletos),
            'porcentaje_completado': round(completos * 100 / total, 2) if total else 100.0,
        }
        return ResultadoCierreTrimestre(trimestre, problemas, estadisticas, a_generar)

    @staticmethod
    def activar_trimestre(trimestre, usuario=None):
        """
        Pasa un trimestre de PENDIENTE a ACTIVO. El período debe estar activo, no puede
        haber otro trimestre activo y los trimestres anteriores deben estar finalizados.
        """
        with transaction.atomic():
            periodo = PeriodoLectivo.objects.select_for_update().get(pk=trimestre.periodo_id)
            trimestre = Trimestre.objects.select_for_update().get(pk=trimestre.pk)
            MAQUINA_TRIMESTRE.validar(trimestre.estado, EstadoTrimestre.ACTIVO)

            errores = []
            if not periodo.esta_activo:
                errores.append({'motivo': f"El período {periodo.nombre} no está activo."})
            otro_activo = periodo.trimestres.filter(estado=EstadoTrimestre.ACTIVO).exclude(pk=trimestre.pk).first()
            if otro_activo:
                errores.append({'motivo': f"{otro_activo.get_nombre_display()} sigue activo."})
            anteriores = periodo.trimestres.filter(numero__lt=trimestre.numero).exclude(
                estado=EstadoTrimestre.FINALIZADO
            )
            for anterior in anteriores:
                errores.append({'motivo': f"{anterior.get_nombre_display()} no está finalizado."})
            if errores:
                raise PrecondicionError(
                    f"No se puede activar {trimestre.get_nombre_display()}.", errores=errores
                )

            trimestre.estado = EstadoTrimestre.ACTIVO
            trimestre.save(update_fields=['estado'])

        logger.info("Trimestre %s activado", trimestre.pk)
        if usuario:
            LogAction(usuario, trimestre, ActionFlag.CHANGE, "Trimestre activado").log()
        return trimestre

    @staticmethod
    def finalizar_trimestre(trimestre, usuario=None):
        """
        Finaliza el trimestre: vuelve a validar la completitud dentro de la misma
        transacción, cierra los insumos y genera los promedios trimestrales. Si es
        el último trimestre también genera los promedios anuales.

        Returns:
            dict con estadísticas del cierre

        Raises:
            TransicionInvalidaError si el trimestre no está ACTIVO
            PrecondicionError con los problemas agrupados por docente
        """
        with transaction.atomic():
            trimestre = Trimestre.objects.select_for_update().select_related('periodo').get(pk=trimestre.pk)
            MAQUINA_TRIMESTRE.validar(trimestre.estado, EstadoTrimestre.FINALIZADO)
            periodo = trimestre.periodo
            if not periodo.esta_activo:
                raise PrecondicionError(
                    f"El período {periodo.nombre} no está activo.",
                    errores=[{'motivo': 'Período finalizado'}]
                )

            resultado = ServiciosTrimestre.validar_cierre_trimestre(trimestre)
            if not resultado.ok:
                raise PrecondicionError(
                    f"No se puede finalizar {trimestre.get_nombre_display()}: "
                    f"{resultado.estadisticas['estudiantes_incompletos']} estudiantes con notas incompletas.",
                    errores=resultado.problemas_por_docente
                )

            insumos_cerrados = Insumo.objects.filter(trimestre=trimestre).exclude(
                estado=EstadoInsumo.CERRADO
            ).update(estado=EstadoInsumo.CERRADO)
            generados = ServiciosPromedios.generar_promedios_trimestre(trimestre)

            trimestre.estado = EstadoTrimestre.FINALIZADO
            trimestre.save(update_fields=['estado'])

            promedios_anuales = None
            if trimestre.es_ultimo:
                promedios_anuales = ServiciosPromedios.generar_promedios_periodo(periodo)

        logger.info(
            "Trimestre %s finalizado: %s promedios, %s insumos cerrados",
            trimestre.pk, generados, insumos_cerrados
        )
        if usuario:
            LogAction(usuario, trimestre, ActionFlag.CHANGE, "Trimestre finalizado").log()

        return {
            'ok': True,
            'trimestre_id': trimestre.pk,
            'insumos_cerrados': insumos_cerrados,
            'promedios_generados': generados,
            'promedios_anuales': promedios_anuales,
            'estadisticas': resultado.estadisticas,
        }
