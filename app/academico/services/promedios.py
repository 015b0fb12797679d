import logging

from django.db import transaction

from .. import calculos
from ..configuracion import obtener_configuracion
from ..exceptions import DatosIncompletosError
from ..models import (
    CalificacionExamen,
    CalificacionInsumo,
    CalificacionProyecto,
    EstadoCurso,
    EstadoMatricula,
    EstadoPromedioAnual,
    Estudiante,
    MateriaCurso,
    PromedioPeriodo,
    PromedioTrimestre,
    TipoCalificacionMateria,
    TipoEvaluacion,
)

logger = logging.getLogger(__name__)


class ServiciosPromedios:
    @staticmethod
    def obtener_pesos(periodo):
        pesos = dict(
            TipoEvaluacion.objects.filter(periodo=periodo).values_list('nombre', 'porcentaje')
        )
        return calculos.validar_pesos(pesos)

    @staticmethod
    def obtener_materias_curso(periodo, tipo_calificacion=None):
        """Materias activas de cursos activos del período."""
        materias = MateriaCurso.objects.filter(
            periodo=periodo,
            estado=EstadoCurso.ACTIVO,
            curso__estado=EstadoCurso.ACTIVO,
        ).select_related('materia', 'curso', 'docente')
        if tipo_calificacion:
            materias = materias.filter(tipo_calificacion=tipo_calificacion)
        return materias.order_by('curso__nivel', 'curso__paralelo', 'materia__nombre')

    @staticmethod
    def obtener_estudiantes(materia_curso):
        """Estudiantes con matrícula activa en el curso de la materia."""
        return Estudiante.objects.filter(
            matriculas__curso=materia_curso.curso,
            matriculas__periodo=materia_curso.periodo,
            matriculas__estado=EstadoMatricula.ACTIVO,
        ).distinct().order_by('apellidos', 'nombres')

    @staticmethod
    def obtener_notas(estudiante, materia_curso, trimestre):
        insumos = CalificacionInsumo.objects.filter(
            estudiante=estudiante,
            insumo__materia_curso=materia_curso,
            insumo__trimestre=trimestre,
        ).values_list('nota_final', flat=True)
        proyecto = CalificacionProyecto.objects.filter(
            estudiante=estudiante, materia_curso=materia_curso, trimestre=trimestre
        ).values_list('calificacion_proyecto', flat=True)
        examen = CalificacionExamen.objects.filter(
            estudiante=estudiante, materia_curso=materia_curso, trimestre=trimestre
        ).values_list('nota_final', flat=True)
        return list(insumos), list(proyecto), list(examen)

    @staticmethod
    def calcular_resultado(estudiante, materia_curso, trimestre, pesos=None, config=None):
        """Resultado del trimestre, completo o no; nunca lanza por datos faltantes."""
        if pesos is None:
            pesos = ServiciosPromedios.obtener_pesos(trimestre.periodo)
        insumos, proyecto, examen = ServiciosPromedios.obtener_notas(estudiante, materia_curso, trimestre)
        return calculos.calcular_promedio_trimestre(insumos, proyecto, examen, pesos, config)

    @staticmethod
    def calcular_promedio_trimestre(estudiante, materia_curso, trimestre, pesos=None, config=None):
        """
        Promedio trimestral de un estudiante en una materia.

        Raises:
            ConfiguracionPesosError si los porcentajes del período no suman 100
            DatosIncompletosError si falta alguno de los tres componentes
        """
        resultado = ServiciosPromedios.calcular_resultado(estudiante, materia_curso, trimestre, pesos, config)
        if not resultado.completo:
            raise DatosIncompletosError(
                f"{estudiante.nombre_completo} no tiene notas completas en "
                f"{materia_curso.materia.nombre}: faltan {', '.join(resultado.componentes_faltantes)}.",
                errores=[{
                    'estudiante_id': estudiante.pk,
                    'estudiante': estudiante.nombre_completo,
                    'materia_curso_id': materia_curso.pk,
                    'materia': materia_curso.materia.nombre,
                    'componentes_faltantes': resultado.componentes_faltantes,
                }]
            )
        return resultado

    @staticmethod
    def guardar_promedio_trimestre(estudiante, materia_curso, trimestre, resultado):
        promedio, _ = PromedioTrimestre.objects.update_or_create(
            estudiante=estudiante,
            materia_curso=materia_curso,
            trimestre=trimestre,
            defaults={campo: getattr(resultado, campo) for campo in calculos.ResultadoTrimestre.CAMPOS},
        )
        return promedio

    @staticmethod
    @transaction.atomic
    def generar_promedios_trimestre(trimestre):
        """
        Genera (o regenera) los promedios del trimestre para todas las materias
        cuantitativas. Se recalcula todo desde las notas registradas.

        Returns:
            int cantidad de promedios guardados
        """
        config = obtener_configuracion()
        pesos = ServiciosPromedios.obtener_pesos(trimestre.periodo)
        generados = 0
        materias = ServiciosPromedios.obtener_materias_curso(
            trimestre.periodo, TipoCalificacionMateria.CUANTITATIVA
        )
        for materia_curso in materias:
            for estudiante in ServiciosPromedios.obtener_estudiantes(materia_curso):
                resultado = ServiciosPromedios.calcular_promedio_trimestre(
                    estudiante, materia_curso, trimestre, pesos, config
                )
                ServiciosPromedios.guardar_promedio_trimestre(estudiante, materia_curso, trimestre, resultado)
                generados += 1

        logger.info("Promedios generados para %s: %s", trimestre, generados)
        return generados

    @staticmethod
    def tabla_promedios(materia_curso, trimestre):
        """
        Tabla de promedios del trimestre para un curso, con la fila PROMEDIOS.

        Returns:
            dict {'filas': [...], 'promedios': {...}}
        """
        config = obtener_configuracion()
        pesos = ServiciosPromedios.obtener_pesos(trimestre.periodo)
        filas = []
        for estudiante in ServiciosPromedios.obtener_estudiantes(materia_curso):
            resultado = ServiciosPromedios.calcular_resultado(estudiante, materia_curso, trimestre, pesos, config)
            filas.append({
                'estudiante_id': estudiante.pk,
                'estudiante': estudiante.nombre_completo,
                **resultado.como_dict(),
            })
        return {
            'filas': filas,
            'promedios': calculos.calcular_fila_promedios(filas, config=config),
        }

    @staticmethod
    @transaction.atomic
    def recalcular_promedio_periodo(estudiante, materia_curso, periodo, config=None):
        """
        Recalcula el promedio anual de un estudiante en una materia a partir de los
        promedios trimestrales guardados. La nota de supletorio registrada se conserva.
        """
        config = config or obtener_configuracion()
        notas = dict(
            PromedioTrimestre.objects.filter(
                estudiante=estudiante, materia_curso=materia_curso, trimestre__periodo=periodo
            ).values_list('trimestre__numero', 'nota_final_trimestre')
        )
        notas_trimestres = [notas.get(numero) for numero in (1, 2, 3)]
        promedio_anual = calculos.calcular_promedio_anual(notas_trimestres)
        estado, en_supletorio = calculos.clasificar_promedio_anual(promedio_anual, config)

        promedio, _ = PromedioPeriodo.objects.select_for_update().get_or_create(
            estudiante=estudiante, materia_curso=materia_curso, periodo=periodo
        )
        promedio.nota_trimestre_1, promedio.nota_trimestre_2, promedio.nota_trimestre_3 = notas_trimestres
        promedio.promedio_anual = promedio_anual
        promedio.cualitativa_anual = calculos.calcular_cualitativa(promedio_anual, config)
        promedio.en_supletorio = en_supletorio
        promedio.promedio_final = promedio_anual

        if en_supletorio and promedio.nota_supletorio is not None:
            promedio.promedio_final, aprobado = calculos.calcular_resultado_supletorio(
                promedio_anual, promedio.nota_supletorio, config
            )
            estado = EstadoPromedioAnual.APROBADO if aprobado else EstadoPromedioAnual.REPROBADO

        promedio.cualitativa_final = calculos.calcular_cualitativa(promedio.promedio_final, config)
        promedio.estado = estado
        promedio.save()
        return promedio

    @staticmethod
    @transaction.atomic
    def generar_promedios_periodo(periodo):
        """
        Recalcula los promedios anuales de todas las materias cuantitativas del período.

        Returns:
            dict con estadísticas
        """
        config = obtener_configuracion()
        estadisticas = {
            'total_promedios_anuales': 0,
            'estudiantes_aprobados': 0,
            'estudiantes_en_supletorio': 0,
            'estudiantes_reprobados': 0,
            'promedios_incompletos': 0,
        }
        materias = ServiciosPromedios.obtener_materias_curso(periodo, TipoCalificacionMateria.CUANTITATIVA)
        for materia_curso in materias:
            for estudiante in ServiciosPromedios.obtener_estudiantes(materia_curso):
                promedio = ServiciosPromedios.recalcular_promedio_periodo(
                    estudiante, materia_curso, periodo, config
                )
                estadisticas['total_promedios_anuales'] += 1
                if promedio.estado is None:
                    estadisticas['promedios_incompletos'] += 1
                elif promedio.estado == EstadoPromedioAnual.APROBADO:
                    estadisticas['estudiantes_aprobados'] += 1
                elif promedio.estado == EstadoPromedioAnual.SUPLETORIO:
                    estadisticas['estudiantes_en_supletorio'] += 1
                else:
                    estadisticas['estudiantes_reprobados'] += 1

        logger.info("Promedios anuales recalculados para %s: %s", periodo, estadisticas)
        return estadisticas
