import logging
from decimal import InvalidOperation

from django.db import transaction

from .. import calculos
from ..configuracion import obtener_configuracion
from ..exceptions import (
    PermisoCalificacionError,
    PrecondicionError,
    RangoCalificacionInvalidoError,
    RecuperacionNoPermitidaError,
    SupletorioNoHabilitadoError,
    TipoCalificacionInvalidoError,
    TrimestreNoEditableError,
)
from ..models import (
    CalificacionComponente,
    CalificacionCualitativa,
    CalificacionExamen,
    CalificacionInsumo,
    CalificacionProyecto,
    EstadoInsumo,
    EstadoMatricula,
    EstadoSupletorio,
    EstadoTrimestre,
    PeriodoLectivo,
    PromedioPeriodo,
    RecuperacionExamen,
    RecuperacionInsumo,
    RolCalificacion,
)
from .promedios import ServiciosPromedios

logger = logging.getLogger(__name__)


class ServiciosCalificacion:
    """
    Registro de notas. El rol de quien califica se recibe como parámetro:
    las materias cuantitativas las califica su docente y las cualitativas el
    tutor del curso; el administrador puede calificar ambas.
    """

    @staticmethod
    def validar_nota(nota):
        try:
            valor = calculos.a_decimal(nota)
        except (InvalidOperation, TypeError, ValueError):
            valor = None
        if valor is None or not valor.is_finite() or valor < 0 or valor > 10:
            raise RangoCalificacionInvalidoError(
                f"La calificación debe estar entre 0 y 10. Valor recibido: {nota}"
            )
        return calculos.redondear(valor)

    @staticmethod
    def validar_trimestre_editable(trimestre):
        if trimestre.estado != EstadoTrimestre.ACTIVO or not trimestre.periodo.esta_activo:
            raise TrimestreNoEditableError(
                f"{trimestre.get_nombre_display()} está en estado {trimestre.estado}; "
                f"solo se califica en trimestres activos.",
                errores=[{'trimestre_id': trimestre.pk, 'estado': trimestre.estado}]
            )

    @staticmethod
    def validar_permiso(materia_curso, rol, docente=None, cuantitativa=True):
        if materia_curso.es_cuantitativa != cuantitativa:
            esperado = 'cuantitativa' if cuantitativa else 'cualitativa'
            raise TipoCalificacionInvalidoError(
                f"{materia_curso.materia.nombre} no admite calificación {esperado}.",
                errores=[{'materia_curso_id': materia_curso.pk, 'tipo': materia_curso.tipo_calificacion}]
            )
        if rol == RolCalificacion.ADMINISTRADOR:
            return
        if cuantitativa:
            permitido = (
                rol == RolCalificacion.DOCENTE
                and docente is not None
                and materia_curso.docente_id == docente.pk
            )
        else:
            permitido = (
                rol == RolCalificacion.TUTOR
                and docente is not None
                and materia_curso.curso.tutor_id == docente.pk
            )
        if not permitido:
            raise PermisoCalificacionError(
                f"El rol {rol} no puede calificar {materia_curso.materia.nombre} en {materia_curso.curso}.",
                errores=[{'materia_curso_id': materia_curso.pk, 'rol': str(rol)}]
            )

    @staticmethod
    def validar_matricula(estudiante, materia_curso):
        matriculado = estudiante.matriculas.filter(
            curso=materia_curso.curso, estado=EstadoMatricula.ACTIVO
        ).exists()
        if not matriculado:
            raise PrecondicionError(
                f"{estudiante.nombre_completo} no tiene matrícula activa en {materia_curso.curso}.",
                errores=[{'estudiante_id': estudiante.pk, 'curso_id': materia_curso.curso_id}]
            )

    @staticmethod
    def _validar_entrada(estudiante, materia_curso, trimestre, rol, docente, cuantitativa=True):
        ServiciosCalificacion.validar_permiso(materia_curso, rol, docente, cuantitativa)
        ServiciosCalificacion.validar_trimestre_editable(trimestre)
        ServiciosCalificacion.validar_matricula(estudiante, materia_curso)

    @staticmethod
    def registrar_calificacion_insumo(insumo, estudiante, nota, rol, docente=None, observaciones=None):
        """Crea o corrige la nota original de un insumo; la nota vigente considera las recuperaciones."""
        ServiciosCalificacion._validar_entrada(
            estudiante, insumo.materia_curso, insumo.trimestre, rol, docente
        )
        if insumo.estado == EstadoInsumo.CERRADO:
            raise TrimestreNoEditableError(f"El insumo {insumo.nombre} está cerrado.")
        nota = ServiciosCalificacion.validar_nota(nota)

        with transaction.atomic():
            calificacion, creada = CalificacionInsumo.objects.select_for_update().get_or_create(
                insumo=insumo,
                estudiante=estudiante,
                defaults={'nota_original': nota, 'nota_final': nota, 'observaciones': observaciones},
            )
            if not creada:
                recuperaciones = calificacion.recuperaciones.values_list('nota_recuperacion', flat=True)
                calificacion.nota_original = nota
                calificacion.nota_final = calculos.calcular_nota_insumo(nota, list(recuperaciones))
                if observaciones is not None:
                    calificacion.observaciones = observaciones
                calificacion.save()
        return calificacion

    @staticmethod
    def registrar_recuperacion_insumo(calificacion, nota, rol, docente=None, observaciones=None):
        insumo = calificacion.insumo
        ServiciosCalificacion._validar_entrada(
            calificacion.estudiante, insumo.materia_curso, insumo.trimestre, rol, docente
        )
        nota = ServiciosCalificacion.validar_nota(nota)
        config = obtener_configuracion()

        with transaction.atomic():
            calificacion = CalificacionInsumo.objects.select_for_update().get(pk=calificacion.pk)
            intentos = calificacion.recuperaciones.count()
            if intentos >= config.max_intentos_recuperacion:
                raise RecuperacionNoPermitidaError(
                    f"El estudiante ya utilizó los {config.max_intentos_recuperacion} intentos de recuperación.",
                    errores=[{'calificacion_id': calificacion.pk, 'intentos': intentos}]
                )
            RecuperacionInsumo.objects.create(
                calificacion=calificacion,
                nota_recuperacion=nota,
                intento=intentos + 1,
                observaciones=observaciones,
            )
            recuperaciones = calificacion.recuperaciones.values_list('nota_recuperacion', flat=True)
            calificacion.nota_final = calculos.calcular_nota_insumo(calificacion.nota_original, list(recuperaciones))
            calificacion.save(update_fields=['nota_final', 'fecha_actualizacion'])
        return calificacion

    @staticmethod
    def registrar_calificacion_proyecto(estudiante, materia_curso, trimestre, nota, rol, docente=None, observaciones=None):
        ServiciosCalificacion._validar_entrada(estudiante, materia_curso, trimestre, rol, docente)
        nota = ServiciosCalificacion.validar_nota(nota)
        calificacion, _ = CalificacionProyecto.objects.update_or_create(
            estudiante=estudiante,
            materia_curso=materia_curso,
            trimestre=trimestre,
            defaults={'calificacion_proyecto': nota, 'observaciones': observaciones},
        )
        return calificacion

    @staticmethod
    def registrar_calificacion_examen(estudiante, materia_curso, trimestre, nota, rol, docente=None, observaciones=None):
        ServiciosCalificacion._validar_entrada(estudiante, materia_curso, trimestre, rol, docente)
        nota = ServiciosCalificacion.validar_nota(nota)

        with transaction.atomic():
            calificacion, creada = CalificacionExamen.objects.select_for_update().get_or_create(
                estudiante=estudiante,
                materia_curso=materia_curso,
                trimestre=trimestre,
                defaults={'calificacion_examen': nota, 'nota_final': nota, 'observaciones': observaciones},
            )
            if not creada:
                calificacion.calificacion_examen = nota
                recuperacion = RecuperacionExamen.objects.filter(calificacion_examen=calificacion).first()
                calificacion.nota_final = calculos.calcular_nota_examen(
                    nota,
                    recuperacion.segundo_examen if recuperacion else None,
                    recuperacion.trabajo_refuerzo if recuperacion else None,
                )
                if observaciones is not None:
                    calificacion.observaciones = observaciones
                calificacion.save()
        return calificacion

    @staticmethod
    def registrar_recuperacion_examen(calificacion, segundo_examen, rol, docente=None,
                                      trabajo_refuerzo=None, observaciones=None):
        """
        Registra el segundo examen. Si el examen original es menor a la nota sin
        refuerzo también se exige el trabajo de refuerzo.
        """
        ServiciosCalificacion._validar_entrada(
            calificacion.estudiante, calificacion.materia_curso, calificacion.trimestre, rol, docente
        )
        config = obtener_configuracion()
        segundo_examen = ServiciosCalificacion.validar_nota(segundo_examen)
        necesita_refuerzo = calificacion.calificacion_examen < config.nota_sin_refuerzo
        if necesita_refuerzo:
            if trabajo_refuerzo is None:
                raise RecuperacionNoPermitidaError(
                    f"Con examen menor a {config.nota_sin_refuerzo} se requiere el trabajo de refuerzo.",
                    errores=[{'calificacion_id': calificacion.pk}]
                )
            trabajo_refuerzo = ServiciosCalificacion.validar_nota(trabajo_refuerzo)
        else:
            trabajo_refuerzo = None

        with transaction.atomic():
            RecuperacionExamen.objects.update_or_create(
                calificacion_examen=calificacion,
                defaults={
                    'segundo_examen': segundo_examen,
                    'trabajo_refuerzo': trabajo_refuerzo,
                    'observaciones': observaciones,
                },
            )
            calificacion.nota_final = calculos.calcular_nota_examen(
                calificacion.calificacion_examen, segundo_examen, trabajo_refuerzo, config
            )
            calificacion.save(update_fields=['nota_final', 'fecha_actualizacion'])
        return calificacion

    @staticmethod
    def registrar_calificacion_cualitativa(estudiante, materia_curso, trimestre, calificacion, rol, docente=None):
        ServiciosCalificacion._validar_entrada(
            estudiante, materia_curso, trimestre, rol, docente, cuantitativa=False
        )
        if calificacion not in CalificacionComponente.values:
            raise RangoCalificacionInvalidoError(
                f"La calificación '{calificacion}' no es válida. "
                f"Valores permitidos: {', '.join(CalificacionComponente.values)}"
            )
        registro, _ = CalificacionCualitativa.objects.update_or_create(
            estudiante=estudiante,
            materia_curso=materia_curso,
            trimestre=trimestre,
            defaults={'calificacion': calificacion},
        )
        return registro

    @staticmethod
    def registrar_nota_supletorio(promedio, nota, rol, docente=None):
        """
        Registra la nota del examen supletorio y recalcula el promedio final.
        Solo con los supletorios ACTIVADOS y para estudiantes marcados en supletorio.
        """
        ServiciosCalificacion.validar_permiso(promedio.materia_curso, rol, docente)
        nota = ServiciosCalificacion.validar_nota(nota)

        with transaction.atomic():
            periodo = PeriodoLectivo.objects.select_for_update().get(pk=promedio.periodo_id)
            if not periodo.esta_activo or periodo.estado_supletorio != EstadoSupletorio.ACTIVADO:
                raise SupletorioNoHabilitadoError(
                    f"Los supletorios del período {periodo.nombre} no están activados "
                    f"(estado: {periodo.estado_supletorio}).",
                    errores=[{'periodo_id': periodo.pk, 'estado_supletorio': periodo.estado_supletorio}]
                )
            promedio = PromedioPeriodo.objects.select_for_update().get(pk=promedio.pk)
            if not promedio.en_supletorio:
                raise SupletorioNoHabilitadoError(
                    f"{promedio.estudiante.nombre_completo} no está en supletorio en "
                    f"{promedio.materia_curso.materia.nombre}.",
                    errores=[{'promedio_id': promedio.pk, 'promedio_anual': promedio.promedio_anual}]
                )
            promedio.nota_supletorio = nota
            promedio.save(update_fields=['nota_supletorio'])
            promedio = ServiciosPromedios.recalcular_promedio_periodo(
                promedio.estudiante, promedio.materia_curso, periodo
            )

        logger.info("Nota de supletorio registrada para promedio %s: %s", promedio.pk, nota)
        return promedio
