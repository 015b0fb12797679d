import logging
from datetime import timedelta

from django.db import transaction

from main.services import ActionFlag, LogAction

from .. import calculos
from ..configuracion import POLITICA_INMEDIATA, POLITICAS_SIN_MATRICULA, obtener_configuracion
from ..estados import MAQUINA_MATRICULA, MAQUINA_PERIODO
from ..exceptions import PrecondicionError
from ..models import (
    Curso,
    EstadoCurso,
    EstadoEstudiante,
    EstadoMatricula,
    EstadoPeriodo,
    EstadoSupletorio,
    EstadoTrimestre,
    MateriaCurso,
    Matricula,
    NombreTrimestre,
    PeriodoLectivo,
    TipoEvaluacion,
    Trimestre,
)
from .elegibilidad import ServiciosElegibilidad
from .promedios import ServiciosPromedios

logger = logging.getLogger(__name__)

NOMBRES_TRIMESTRE = (
    NombreTrimestre.PRIMER_TRIMESTRE,
    NombreTrimestre.SEGUNDO_TRIMESTRE,
    NombreTrimestre.TERCER_TRIMESTRE,
)

# Cada trimestre debe abarcar al menos dos días
DIAS_MINIMOS_PERIODO = 6


def dividir_en_trimestres(fecha_inicio, fecha_fin):
    """Parte el rango del período en tres tramos consecutivos de duración similar."""
    duracion = (fecha_fin - fecha_inicio).days // 3
    tramos = []
    inicio = fecha_inicio
    for numero in range(1, 4):
        fin = fecha_fin if numero == 3 else inicio + timedelta(days=duracion - 1)
        tramos.append((inicio, fin))
        inicio = fin + timedelta(days=1)
    return tramos


class ServiciosPeriodo:
    @staticmethod
    def obtener_periodo_activo():
        return PeriodoLectivo.objects.filter(estado=EstadoPeriodo.ACTIVO).first()

    @staticmethod
    def crear_periodo(nombre, fecha_inicio, fecha_fin, porcentajes, usuario=None):
        """
        Crea un período con sus tres trimestres (PENDIENTE) y los porcentajes de evaluación.

        Raises:
            ConfiguracionPesosError si los porcentajes no suman 100
            PrecondicionError si ya hay un período activo o las fechas no son válidas
        """
        pesos = calculos.validar_pesos(porcentajes)
        if (fecha_fin - fecha_inicio).days < DIAS_MINIMOS_PERIODO:
            raise PrecondicionError(
                "El rango de fechas del período no es válido.",
                errores=[{'fecha_inicio': str(fecha_inicio), 'fecha_fin': str(fecha_fin)}]
            )

        with transaction.atomic():
            activo = PeriodoLectivo.objects.select_for_update().filter(estado=EstadoPeriodo.ACTIVO).first()
            if activo:
                raise PrecondicionError(
                    f"Ya existe un período activo ({activo.nombre}). Debe finalizarse antes de crear otro.",
                    errores=[{'periodo_id': activo.pk, 'nombre': activo.nombre}]
                )

            periodo = PeriodoLectivo.objects.create(
                nombre=nombre, fecha_inicio=fecha_inicio, fecha_fin=fecha_fin
            )
            for numero, (inicio, fin) in enumerate(dividir_en_trimestres(fecha_inicio, fecha_fin), start=1):
                Trimestre.objects.create(
                    periodo=periodo,
                    numero=numero,
                    nombre=NOMBRES_TRIMESTRE[numero - 1],
                    fecha_inicio=inicio,
                    fecha_fin=fin,
                )
            for nombre_tipo, porcentaje in pesos.items():
                TipoEvaluacion.objects.create(periodo=periodo, nombre=nombre_tipo, porcentaje=porcentaje)

        logger.info("Período %s creado (%s)", periodo.pk, periodo.nombre)
        if usuario:
            LogAction(usuario, periodo, ActionFlag.ADDITION, "Período lectivo creado").log()
        return periodo

    @staticmethod
    def actualizar_porcentajes(periodo, porcentajes, usuario=None):
        pesos = calculos.validar_pesos(porcentajes)
        if not periodo.esta_activo:
            raise PrecondicionError(
                f"El período {periodo.nombre} está finalizado; no se pueden cambiar sus porcentajes."
            )
        with transaction.atomic():
            for nombre_tipo, porcentaje in pesos.items():
                TipoEvaluacion.objects.update_or_create(
                    periodo=periodo, nombre=nombre_tipo, defaults={'porcentaje': porcentaje}
                )

        if usuario:
            LogAction(usuario, periodo, ActionFlag.CHANGE, f"Porcentajes actualizados: {pesos}").log()
        return pesos

    @staticmethod
    def _revisar_precondiciones(periodo):
        errores = []
        advertencias = []
        trimestres = list(periodo.trimestres.order_by('numero'))
        if len(trimestres) < 3:
            errores.append(f"El período tiene {len(trimestres)} de 3 trimestres registrados.")
        for trimestre in trimestres:
            if trimestre.estado != EstadoTrimestre.FINALIZADO:
                errores.append(
                    f"{trimestre.get_nombre_display()} está en estado {trimestre.estado}; debe estar FINALIZADO."
                )
        if periodo.estado_supletorio == EstadoSupletorio.ACTIVADO:
            errores.append("Los supletorios están activados; deben cerrarse antes de finalizar el período.")
        elif periodo.estado_supletorio == EstadoSupletorio.PENDIENTE:
            advertencias.append("Los supletorios nunca fueron activados en este período.")
        return errores, advertencias

    @staticmethod
    def validar_cierre_periodo(periodo):
        """
        Vista previa del cierre: indica si el período puede finalizarse, todos los
        motivos por los que no, y cuántos registros se verían afectados.
        """
        errores, advertencias = ServiciosPeriodo._revisar_precondiciones(periodo)
        if not periodo.esta_activo:
            errores.insert(0, f"El período {periodo.nombre} ya está finalizado.")
        return {
            'puede_cerrar': not errores,
            'errores': errores,
            'advertencias': advertencias,
            'preview': {
                'total_matriculas_a_finalizar': Matricula.objects.filter(
                    periodo=periodo, estado=EstadoMatricula.ACTIVO
                ).count(),
                'total_cursos_a_inactivar': Curso.objects.filter(
                    periodo=periodo, estado=EstadoCurso.ACTIVO
                ).count(),
                'total_materias_curso_a_inactivar': MateriaCurso.objects.filter(
                    periodo=periodo, estado=EstadoCurso.ACTIVO
                ).count(),
            },
        }

    @staticmethod
    def _nuevo_estado_estudiante(estudiante, periodo, graduado, politica):
        if graduado:
            return EstadoEstudiante.GRADUADO
        matricula_futura = estudiante.matriculas.filter(estado=EstadoMatricula.ACTIVO).exclude(periodo=periodo)
        if matricula_futura.exists():
            return EstadoEstudiante.ACTIVO
        if politica == POLITICA_INMEDIATA:
            return EstadoEstudiante.SIN_MATRICULA
        return EstadoEstudiante.ACTIVO

    @staticmethod
    def finalizar_periodo(periodo, usuario=None, politica_sin_matricula=None):
        """
        Finaliza el período lectivo en una sola transacción:

        1. Recalcula los promedios anuales.
        2. Evalúa la graduación de los estudiantes del último nivel.
        3. Finaliza las matrículas activas.
        4. Actualiza el estado de cada estudiante (GRADUADO, SIN_MATRICULA o ACTIVO).
        5. Inactiva cursos y materias del período.
        6. Marca el período como FINALIZADO.

        Args:
            periodo: PeriodoLectivo
            usuario: Usuario que realiza el cierre (para el LogEntry)
            politica_sin_matricula: INMEDIATA o CONSERVAR_ACTIVO; por defecto la configurada

        Returns:
            dict {'ok': True, 'estadisticas': {...}, 'advertencia': str | None}

        Raises:
            TransicionInvalidaError si el período ya no está ACTIVO
            PrecondicionError con todos los motivos que impiden el cierre
        """
        config = obtener_configuracion()
        politica = politica_sin_matricula or config.politica_sin_matricula
        if politica not in POLITICAS_SIN_MATRICULA:
            raise PrecondicionError(
                f"Política sin matrícula desconocida: {politica}",
                errores=[{'politica': politica, 'permitidas': list(POLITICAS_SIN_MATRICULA)}]
            )

        with transaction.atomic():
            periodo = PeriodoLectivo.objects.select_for_update().get(pk=periodo.pk)
            MAQUINA_PERIODO.validar(periodo.estado, EstadoPeriodo.FINALIZADO)

            errores, advertencias = ServiciosPeriodo._revisar_precondiciones(periodo)
            if errores:
                raise PrecondicionError(
                    f"No se puede finalizar el período {periodo.nombre}.",
                    errores=[{'motivo': motivo} for motivo in errores]
                )

            ServiciosPromedios.generar_promedios_periodo(periodo)

            matriculas = list(
                Matricula.objects.select_for_update().filter(
                    periodo=periodo, estado=EstadoMatricula.ACTIVO
                ).select_related('estudiante', 'curso')
            )
            graduados = set()
            for matricula in matriculas:
                if matricula.curso.nivel != config.nivel_final:
                    continue
                elegibilidad = ServiciosElegibilidad.evaluar_elegibilidad(matricula.estudiante, periodo, config)
                if elegibilidad['graduado']:
                    graduados.add(matricula.estudiante_id)

            for matricula in matriculas:
                MAQUINA_MATRICULA.validar(matricula.estado, EstadoMatricula.FINALIZADO)
                matricula.estado = EstadoMatricula.FINALIZADO
                matricula.save(update_fields=['estado'])

            estadisticas = {
                'estudiantes_graduados': 0,
                'estudiantes_sin_matricula': 0,
                'estudiantes_activos': 0,
                'matriculas_finalizadas': len(matriculas),
            }
            for matricula in matriculas:
                estudiante = matricula.estudiante
                nuevo = ServiciosPeriodo._nuevo_estado_estudiante(
                    estudiante, periodo, estudiante.pk in graduados, politica
                )
                if nuevo == EstadoEstudiante.GRADUADO:
                    estadisticas['estudiantes_graduados'] += 1
                elif nuevo == EstadoEstudiante.SIN_MATRICULA:
                    estadisticas['estudiantes_sin_matricula'] += 1
                else:
                    estadisticas['estudiantes_activos'] += 1
                if estudiante.estado != nuevo:
                    estudiante.estado = nuevo
                    estudiante.save(update_fields=['estado'])

            estadisticas['materias_curso_inactivadas'] = MateriaCurso.objects.filter(
                periodo=periodo, estado=EstadoCurso.ACTIVO
            ).update(estado=EstadoCurso.INACTIVO)
            estadisticas['cursos_inactivados'] = Curso.objects.filter(
                periodo=periodo, estado=EstadoCurso.ACTIVO
            ).update(estado=EstadoCurso.INACTIVO)

            periodo.estado = EstadoPeriodo.FINALIZADO
            periodo.save(update_fields=['estado', 'fecha_actualizacion'])

        logger.info("Período %s finalizado: %s", periodo.pk, estadisticas)
        if usuario:
            LogAction(usuario, periodo, ActionFlag.CHANGE, "Período lectivo finalizado").log()

        return {
            'ok': True,
            'estadisticas': estadisticas,
            'advertencia': advertencias[0] if advertencias else None,
        }
