from .. import calculos
from ..configuracion import obtener_configuracion
from ..models import EstadoCurso, EstadoMatricula, MateriaCurso, PromedioPeriodo, TipoCalificacionMateria


class ServiciosElegibilidad:
    @staticmethod
    def obtener_matricula(estudiante, periodo):
        return estudiante.matriculas.filter(periodo=periodo).exclude(
            estado=EstadoMatricula.RETIRADO
        ).select_related('curso').first()

    @staticmethod
    def materias_requeridas(curso, periodo):
        """Materias cuantitativas del curso; con el período activo, solo las activas."""
        materias = MateriaCurso.objects.filter(
            curso=curso, tipo_calificacion=TipoCalificacionMateria.CUANTITATIVA
        ).select_related('materia')
        if periodo.esta_activo:
            materias = materias.filter(estado=EstadoCurso.ACTIVO)
        return materias.order_by('materia__nombre')

    @staticmethod
    def evaluar_elegibilidad(estudiante, periodo, config=None):
        """
        Decide si el estudiante se gradúa en el período: debe estar en el último
        nivel y tener nota anual (o final de supletorio) mínima en todas las materias.

        Returns:
            dict {'estudiante_id', 'graduado', 'es_ultimo_nivel', 'promedios_por_materia'}
        """
        config = config or obtener_configuracion()
        respuesta = {
            'estudiante_id': estudiante.pk,
            'graduado': False,
            'es_ultimo_nivel': False,
            'promedios_por_materia': [],
        }
        matricula = ServiciosElegibilidad.obtener_matricula(estudiante, periodo)
        if matricula is None:
            return respuesta

        promedios = {
            p.materia_curso_id: p
            for p in PromedioPeriodo.objects.filter(estudiante=estudiante, periodo=periodo)
        }
        notas = {}
        for materia_curso in ServiciosElegibilidad.materias_requeridas(matricula.curso, periodo):
            promedio = promedios.get(materia_curso.pk)
            notas[str(materia_curso.materia)] = promedio.nota_efectiva if promedio else None

        cumple, detalle = calculos.evaluar_graduacion(notas, config)
        respuesta['es_ultimo_nivel'] = matricula.curso.nivel == config.nivel_final
        respuesta['graduado'] = respuesta['es_ultimo_nivel'] and cumple
        respuesta['promedios_por_materia'] = detalle
        return respuesta
