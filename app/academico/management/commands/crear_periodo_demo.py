import random
from datetime import date, timedelta

from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from academico.exceptions import AcademicoException
from academico.models import (
    Curso, EspecialidadCurso, Estudiante, Insumo, Materia, MateriaCurso, Matricula,
    NivelCurso, RolCalificacion, TipoCalificacionMateria
)
from academico.services import ServiciosCalificacion, ServiciosPeriodo, ServiciosTrimestre
from institucional.models import Docente, Usuario

MATERIAS = [
    ('MAT', 'Matemática', TipoCalificacionMateria.CUANTITATIVA),
    ('LEN', 'Lengua y Literatura', TipoCalificacionMateria.CUANTITATIVA),
    ('FIS', 'Física', TipoCalificacionMateria.CUANTITATIVA),
    ('CCI', 'Comportamiento', TipoCalificacionMateria.CUALITATIVA),
]

NOMBRES = ['Ana', 'Luis', 'María', 'Carlos', 'Sofía', 'Diego', 'Valeria', 'Jorge', 'Camila', 'Andrés']
APELLIDOS = ['Paredes', 'Mora', 'Cevallos', 'Zambrano', 'Vera', 'Andrade', 'Loor', 'Intriago']


class Command(BaseCommand):
    help = 'Crea un período lectivo de demostración con cursos, materias, docentes y estudiantes matriculados.'

    def add_arguments(self, parser):
        parser.add_argument('--nombre', default=None, help='Nombre del período (por defecto "Demo <año>")')
        parser.add_argument('--inicio', default=None, help='Fecha de inicio en formato AAAA-MM-DD')
        parser.add_argument('--estudiantes', type=int, default=10, help='Estudiantes por curso')
        parser.add_argument(
            '--con-notas', action='store_true',
            help='Registra notas completas del primer trimestre para todos los estudiantes',
        )

    def handle(self, *args, **options):
        try:
            inicio = date.fromisoformat(options['inicio']) if options['inicio'] else date(date.today().year, 5, 1)
        except ValueError:
            raise CommandError('La fecha de inicio debe tener el formato AAAA-MM-DD.')
        nombre = options['nombre'] or f"Demo {inicio.year}-{inicio.year + 1}"

        self.stdout.write(self.style.WARNING(f'Creando período de demostración "{nombre}"...'))
        try:
            with transaction.atomic():
                periodo = ServiciosPeriodo.crear_periodo(
                    nombre, inicio, inicio + timedelta(days=300),
                    {'INSUMOS': 60, 'PROYECTO': 20, 'EXAMEN': 20},
                )
                docentes = self.crear_docentes()
                cursos = self.crear_cursos(periodo, docentes)
                self.crear_estudiantes(periodo, cursos, options['estudiantes'])
                primer_trimestre = ServiciosTrimestre.activar_trimestre(periodo.trimestres.get(numero=1))
                if options['con_notas']:
                    self.registrar_notas(primer_trimestre)
        except AcademicoException as e:
            raise CommandError(e.mensaje)

        self.stdout.write(self.style.SUCCESS(
            f'Período "{periodo.nombre}" creado con {len(cursos)} cursos y '
            f'{Matricula.objects.filter(periodo=periodo).count()} matrículas.'
        ))

    def crear_docentes(self):
        self.stdout.write("Creando docentes...")
        grupo, _ = Group.objects.get_or_create(name='Docente')
        docentes = []
        for indice, (codigo, materia, _) in enumerate(MATERIAS, start=1):
            email = f"docente.{codigo.lower()}@demo.edu.ec"
            usuario = Usuario.objects.filter(email=email).first()
            if usuario is None:
                usuario = Usuario.objects.create_user(email, 'docente123')
                usuario.groups.add(grupo)
            docente, _ = Docente.objects.get_or_create(
                cedula=f"09000000{indice:02d}",
                defaults={
                    'nombres': f"Docente de {materia}",
                    'apellidos': APELLIDOS[indice % len(APELLIDOS)],
                    'usuario': usuario,
                },
            )
            docentes.append(docente)
        return docentes

    def crear_cursos(self, periodo, docentes):
        self.stdout.write("Creando cursos y materias...")
        materias = []
        for codigo, nombre, tipo in MATERIAS:
            materia, _ = Materia.objects.get_or_create(codigo=codigo, defaults={'nombre': nombre})
            materias.append((materia, tipo))

        cursos = []
        for nivel in (NivelCurso.DECIMO, NivelCurso.TERCERO_BACHILLERATO):
            especialidad = EspecialidadCurso.BASICA if nivel == NivelCurso.DECIMO else EspecialidadCurso.CIENCIAS
            curso = Curso.objects.create(
                nivel=nivel, paralelo='A', especialidad=especialidad,
                periodo=periodo, tutor=docentes[-1]
            )
            for (materia, tipo), docente in zip(materias, docentes):
                MateriaCurso.objects.create(
                    materia=materia, curso=curso, periodo=periodo,
                    docente=docente, tipo_calificacion=tipo
                )
            cursos.append(curso)
        return cursos

    def crear_estudiantes(self, periodo, cursos, cantidad):
        self.stdout.write("Creando estudiantes y matrículas...")
        secuencia = Estudiante.objects.count()
        for curso in cursos:
            for _ in range(cantidad):
                secuencia += 1
                estudiante = Estudiante.objects.create(
                    cedula=f"13{secuencia:08d}",
                    nombres=random.choice(NOMBRES),
                    apellidos=f"{random.choice(APELLIDOS)} {random.choice(APELLIDOS)}",
                )
                Matricula.objects.create(estudiante=estudiante, curso=curso, periodo=periodo)

    def registrar_notas(self, trimestre):
        self.stdout.write(f"Registrando notas de {trimestre.get_nombre_display()}...")
        rol = RolCalificacion.ADMINISTRADOR
        for materia_curso in MateriaCurso.objects.filter(periodo=trimestre.periodo).select_related('curso'):
            estudiantes = list(
                Estudiante.objects.filter(matriculas__curso=materia_curso.curso, matriculas__periodo=trimestre.periodo)
            )
            if not materia_curso.es_cuantitativa:
                for estudiante in estudiantes:
                    ServiciosCalificacion.registrar_calificacion_cualitativa(
                        estudiante, materia_curso, trimestre, 'A', rol
                    )
                continue

            insumos = [
                Insumo.objects.create(materia_curso=materia_curso, trimestre=trimestre, nombre=f"Insumo {n}")
                for n in (1, 2)
            ]
            for estudiante in estudiantes:
                for insumo in insumos:
                    ServiciosCalificacion.registrar_calificacion_insumo(
                        insumo, estudiante, round(random.uniform(5, 10), 2), rol
                    )
                ServiciosCalificacion.registrar_calificacion_proyecto(
                    estudiante, materia_curso, trimestre, round(random.uniform(5, 10), 2), rol
                )
                ServiciosCalificacion.registrar_calificacion_examen(
                    estudiante, materia_curso, trimestre, round(random.uniform(5, 10), 2), rol
                )
