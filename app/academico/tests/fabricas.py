from datetime import date

from academico.models import (
    CalificacionCualitativa, CalificacionExamen, CalificacionInsumo, CalificacionProyecto,
    Curso, EspecialidadCurso, Estudiante, Insumo, Materia, MateriaCurso, Matricula,
    NivelCurso, TipoCalificacionMateria
)
from academico.services import ServiciosPeriodo, ServiciosPromedios, ServiciosTrimestre
from institucional.models import Docente

PESOS = {'INSUMOS': 30, 'PROYECTO': 30, 'EXAMEN': 40}


def crear_periodo(nombre='2025-2026', porcentajes=None):
    return ServiciosPeriodo.crear_periodo(
        nombre, date(2025, 5, 1), date(2026, 2, 27), porcentajes or PESOS
    )


def crear_docente(cedula, nombres='Docente', apellidos='Prueba'):
    return Docente.objects.create(cedula=cedula, nombres=nombres, apellidos=apellidos)


def crear_curso(periodo, nivel=NivelCurso.DECIMO, paralelo='A', tutor=None):
    return Curso.objects.create(
        nivel=nivel, paralelo=paralelo, especialidad=EspecialidadCurso.BASICA,
        periodo=periodo, tutor=tutor
    )


def crear_materia_curso(curso, codigo, nombre=None, docente=None, tipo=TipoCalificacionMateria.CUANTITATIVA):
    materia, _ = Materia.objects.get_or_create(codigo=codigo, defaults={'nombre': nombre or codigo})
    return MateriaCurso.objects.create(
        materia=materia, curso=curso, periodo=curso.periodo,
        docente=docente, tipo_calificacion=tipo
    )


def crear_estudiante(cedula, nombres='Estudiante', apellidos='Prueba', curso=None):
    estudiante = Estudiante.objects.create(cedula=cedula, nombres=nombres, apellidos=apellidos)
    if curso is not None:
        Matricula.objects.create(estudiante=estudiante, curso=curso, periodo=curso.periodo)
    return estudiante


def calificar(estudiante, materia_curso, trimestre, insumos=(8,), proyecto=7, examen=6):
    """Guarda notas directamente, sin pasar por las reglas de edición."""
    for numero, nota in enumerate(insumos, start=1):
        insumo, _ = Insumo.objects.get_or_create(
            materia_curso=materia_curso, trimestre=trimestre, nombre=f"Insumo {numero}"
        )
        CalificacionInsumo.objects.update_or_create(
            insumo=insumo, estudiante=estudiante,
            defaults={'nota_original': nota, 'nota_final': nota},
        )
    if proyecto is not None:
        CalificacionProyecto.objects.update_or_create(
            estudiante=estudiante, materia_curso=materia_curso, trimestre=trimestre,
            defaults={'calificacion_proyecto': proyecto},
        )
    if examen is not None:
        CalificacionExamen.objects.update_or_create(
            estudiante=estudiante, materia_curso=materia_curso, trimestre=trimestre,
            defaults={'calificacion_examen': examen, 'nota_final': examen},
        )


def completar_trimestre(trimestre, nota=8, notas=None):
    """
    Registra notas completas para todos los estudiantes del período.

    Args:
        nota: nota usada en todos los componentes
        notas: dict {(estudiante_id, materia_curso_id): nota} con las excepciones
    """
    notas = notas or {}
    for materia_curso in ServiciosPromedios.obtener_materias_curso(trimestre.periodo):
        for estudiante in ServiciosPromedios.obtener_estudiantes(materia_curso):
            if not materia_curso.es_cuantitativa:
                CalificacionCualitativa.objects.update_or_create(
                    estudiante=estudiante, materia_curso=materia_curso, trimestre=trimestre,
                    defaults={'calificacion': 'A'},
                )
                continue
            valor = notas.get((estudiante.pk, materia_curso.pk), nota)
            calificar(estudiante, materia_curso, trimestre, insumos=(valor,), proyecto=valor, examen=valor)


def cerrar_trimestre(trimestre, nota=8, notas=None):
    ServiciosTrimestre.activar_trimestre(trimestre)
    completar_trimestre(trimestre, nota, notas)
    return ServiciosTrimestre.finalizar_trimestre(trimestre)


def cerrar_trimestres(periodo, hasta=3, nota=8, notas=None):
    for trimestre in periodo.trimestres.filter(numero__lte=hasta).order_by('numero'):
        cerrar_trimestre(trimestre, nota, notas)
