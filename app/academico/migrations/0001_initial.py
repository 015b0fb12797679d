import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

ESTADO_CURSO = [('ACTIVO', 'Activo'), ('INACTIVO', 'Inactivo')]
CUALITATIVA = [
    ('DA', 'Domina los aprendizajes'),
    ('AA', 'Alcanza los aprendizajes'),
    ('PA', 'Próximo a alcanzar los aprendizajes'),
    ('NA', 'No alcanza los aprendizajes'),
]
VALIDADORES_NOTA = [django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(10)]


def nota(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=4, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('institucional', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PeriodoLectivo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100)),
                ('fecha_inicio', models.DateField()),
                ('fecha_fin', models.DateField()),
                ('estado', models.CharField(choices=[('ACTIVO', 'Activo'), ('FINALIZADO', 'Finalizado')], db_index=True, default='ACTIVO', max_length=20)),
                ('estado_supletorio', models.CharField(choices=[('PENDIENTE', 'Pendiente'), ('ACTIVADO', 'Activado'), ('CERRADO', 'Cerrado')], default='PENDIENTE', max_length=20)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Período Lectivo',
                'verbose_name_plural': 'Períodos Lectivos',
                'db_table': 'academico_periodos_lectivos',
                'ordering': ['-fecha_inicio'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('estado', 'ACTIVO')), fields=('estado',), name='periodo_lectivo_unico_activo'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Trimestre',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('numero', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(3)])),
                ('nombre', models.CharField(choices=[('PRIMER TRIMESTRE', 'Primer trimestre'), ('SEGUNDO TRIMESTRE', 'Segundo trimestre'), ('TERCER TRIMESTRE', 'Tercer trimestre')], max_length=30)),
                ('fecha_inicio', models.DateField()),
                ('fecha_fin', models.DateField()),
                ('estado', models.CharField(choices=[('PENDIENTE', 'Pendiente'), ('ACTIVO', 'Activo'), ('FINALIZADO', 'Finalizado')], db_index=True, default='PENDIENTE', max_length=20)),
                ('periodo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='trimestres', to='academico.periodolectivo')),
            ],
            options={
                'verbose_name': 'Trimestre',
                'verbose_name_plural': 'Trimestres',
                'db_table': 'academico_trimestres',
                'ordering': ['periodo', 'numero'],
                'unique_together': {('periodo', 'numero')},
            },
        ),
        migrations.CreateModel(
            name='TipoEvaluacion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(choices=[('INSUMOS', 'Insumos'), ('PROYECTO', 'Proyecto'), ('EXAMEN', 'Examen')], max_length=20)),
                ('porcentaje', models.DecimalField(decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('periodo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tipos_evaluacion', to='academico.periodolectivo')),
            ],
            options={
                'verbose_name': 'Tipo de Evaluación',
                'verbose_name_plural': 'Tipos de Evaluación',
                'db_table': 'academico_tipos_evaluacion',
                'unique_together': {('periodo', 'nombre')},
            },
        ),
        migrations.CreateModel(
            name='Materia',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100)),
                ('codigo', models.CharField(max_length=20, unique=True)),
                ('descripcion', models.TextField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Materia',
                'verbose_name_plural': 'Materias',
                'db_table': 'academico_materias',
            },
        ),
        migrations.CreateModel(
            name='Curso',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nivel', models.CharField(choices=[('OCTAVO', '8vo de Básica'), ('NOVENO', '9no de Básica'), ('DECIMO', '10mo de Básica'), ('PRIMERO BACHILLERATO', '1ro de Bachillerato'), ('SEGUNDO BACHILLERATO', '2do de Bachillerato'), ('TERCERO BACHILLERATO', '3ro de Bachillerato')], max_length=30)),
                ('paralelo', models.CharField(max_length=2)),
                ('especialidad', models.CharField(choices=[('BASICA', 'Básica'), ('TECNICO', 'Técnico'), ('CIENCIAS', 'Ciencias')], default='BASICA', max_length=20)),
                ('estado', models.CharField(choices=ESTADO_CURSO, db_index=True, default='ACTIVO', max_length=20)),
                ('periodo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cursos', to='academico.periodolectivo')),
                ('tutor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='cursos_tutorados', to='institucional.docente')),
            ],
            options={
                'verbose_name': 'Curso',
                'verbose_name_plural': 'Cursos',
                'db_table': 'academico_cursos',
                'unique_together': {('nivel', 'paralelo', 'especialidad', 'periodo')},
            },
        ),
        migrations.CreateModel(
            name='MateriaCurso',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tipo_calificacion', models.CharField(choices=[('CUANTITATIVA', 'Cuantitativa'), ('CUALITATIVA', 'Cualitativa')], default='CUANTITATIVA', max_length=20)),
                ('estado', models.CharField(choices=ESTADO_CURSO, db_index=True, default='ACTIVO', max_length=20)),
                ('curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='materias_curso', to='academico.curso')),
                ('docente', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='materias_curso', to='institucional.docente')),
                ('materia', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='materias_curso', to='academico.materia')),
                ('periodo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='materias_curso', to='academico.periodolectivo')),
            ],
            options={
                'verbose_name': 'Materia del Curso',
                'verbose_name_plural': 'Materias del Curso',
                'db_table': 'academico_materias_curso',
                'unique_together': {('materia', 'curso')},
                'indexes': [
                    models.Index(fields=['periodo', 'estado'], name='materia_curso_periodo_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Estudiante',
            fields=[
                ('persona_ptr', models.OneToOneField(auto_created=True, on_delete=django.db.models.deletion.CASCADE, parent_link=True, primary_key=True, serialize=False, to='institucional.persona')),
                ('estado', models.CharField(choices=[('ACTIVO', 'Activo'), ('SIN_MATRICULA', 'Sin matrícula'), ('INACTIVO_TEMPORAL', 'Inactivo temporal'), ('GRADUADO', 'Graduado'), ('RETIRADO', 'Retirado')], db_index=True, default='ACTIVO', max_length=20)),
                ('fecha_de_nacimiento', models.DateField(blank=True, null=True)),
                ('direccion', models.CharField(blank=True, max_length=200, null=True)),
            ],
            options={
                'verbose_name': 'Estudiante',
                'verbose_name_plural': 'Estudiantes',
                'db_table': 'academico_estudiantes',
            },
            bases=('institucional.persona',),
        ),
        migrations.CreateModel(
            name='Matricula',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('numero_de_matricula', models.CharField(blank=True, max_length=30)),
                ('origen', models.CharField(choices=[('DISTRITO', 'Distrito'), ('MANUAL', 'Manual')], default='MANUAL', max_length=20)),
                ('estado', models.CharField(choices=[('ACTIVO', 'Activo'), ('RETIRADO', 'Retirado'), ('FINALIZADO', 'Finalizado')], db_index=True, default='ACTIVO', max_length=20)),
                ('fecha_retiro', models.DateTimeField(blank=True, null=True)),
                ('motivo_retiro', models.TextField(blank=True, null=True)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matriculas', to='academico.curso')),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matriculas', to='academico.estudiante')),
                ('periodo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matriculas', to='academico.periodolectivo')),
            ],
            options={
                'verbose_name': 'Matrícula',
                'verbose_name_plural': 'Matrículas',
                'db_table': 'academico_matriculas',
                'unique_together': {('estudiante', 'periodo')},
                'indexes': [
                    models.Index(fields=['curso', 'estado'], name='matricula_curso_estado_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Insumo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100)),
                ('estado', models.CharField(choices=[('BORRADOR', 'Borrador'), ('ACTIVO', 'Activo'), ('PUBLICADO', 'Publicado'), ('CERRADO', 'Cerrado')], default='ACTIVO', max_length=20)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('materia_curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='insumos', to='academico.materiacurso')),
                ('trimestre', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='insumos', to='academico.trimestre')),
            ],
            options={
                'verbose_name': 'Insumo',
                'verbose_name_plural': 'Insumos',
                'db_table': 'academico_insumos',
            },
        ),
        migrations.CreateModel(
            name='CalificacionInsumo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nota_original', nota(validators=VALIDADORES_NOTA)),
                ('nota_final', nota(help_text='Nota vigente luego de las recuperaciones', validators=VALIDADORES_NOTA)),
                ('observaciones', models.TextField(blank=True, null=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_insumo', to='academico.estudiante')),
                ('insumo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones', to='academico.insumo')),
            ],
            options={
                'verbose_name': 'Calificación de Insumo',
                'verbose_name_plural': 'Calificaciones de Insumos',
                'db_table': 'academico_calificaciones_insumo',
                'unique_together': {('insumo', 'estudiante')},
            },
        ),
        migrations.CreateModel(
            name='RecuperacionInsumo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nota_recuperacion', nota(validators=VALIDADORES_NOTA)),
                ('intento', models.PositiveSmallIntegerField()),
                ('observaciones', models.TextField(blank=True, null=True)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('calificacion', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recuperaciones', to='academico.calificacioninsumo')),
            ],
            options={
                'verbose_name': 'Recuperación de Insumo',
                'verbose_name_plural': 'Recuperaciones de Insumos',
                'db_table': 'academico_recuperaciones_insumo',
                'ordering': ['intento'],
                'unique_together': {('calificacion', 'intento')},
            },
        ),
        migrations.CreateModel(
            name='CalificacionProyecto',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('calificacion_proyecto', nota(validators=VALIDADORES_NOTA)),
                ('observaciones', models.TextField(blank=True, null=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_proyecto', to='academico.estudiante')),
                ('materia_curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_proyecto', to='academico.materiacurso')),
                ('trimestre', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_proyecto', to='academico.trimestre')),
            ],
            options={
                'verbose_name': 'Calificación de Proyecto',
                'verbose_name_plural': 'Calificaciones de Proyecto',
                'db_table': 'academico_calificaciones_proyecto',
                'unique_together': {('estudiante', 'materia_curso', 'trimestre')},
            },
        ),
        migrations.CreateModel(
            name='CalificacionExamen',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('calificacion_examen', nota(validators=VALIDADORES_NOTA)),
                ('nota_final', nota(help_text='Nota vigente luego de la recuperación', validators=VALIDADORES_NOTA)),
                ('observaciones', models.TextField(blank=True, null=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_examen', to='academico.estudiante')),
                ('materia_curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_examen', to='academico.materiacurso')),
                ('trimestre', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_examen', to='academico.trimestre')),
            ],
            options={
                'verbose_name': 'Calificación de Examen',
                'verbose_name_plural': 'Calificaciones de Examen',
                'db_table': 'academico_calificaciones_examen',
                'unique_together': {('estudiante', 'materia_curso', 'trimestre')},
            },
        ),
        migrations.CreateModel(
            name='RecuperacionExamen',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('segundo_examen', nota(validators=VALIDADORES_NOTA)),
                ('trabajo_refuerzo', nota(blank=True, null=True, validators=VALIDADORES_NOTA)),
                ('observaciones', models.TextField(blank=True, null=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('calificacion_examen', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='recuperacion', to='academico.calificacionexamen')),
            ],
            options={
                'verbose_name': 'Recuperación de Examen',
                'verbose_name_plural': 'Recuperaciones de Examen',
                'db_table': 'academico_recuperaciones_examen',
            },
        ),
        migrations.CreateModel(
            name='CalificacionCualitativa',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('calificacion', models.CharField(blank=True, choices=[('+A', '+A'), ('A', 'A'), ('A-', 'A-'), ('B+', 'B+'), ('B', 'B'), ('B-', 'B-'), ('C+', 'C+'), ('C', 'C'), ('C-', 'C-'), ('D', 'D')], max_length=2, null=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_cualitativas', to='academico.estudiante')),
                ('materia_curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_cualitativas', to='academico.materiacurso')),
                ('trimestre', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='calificaciones_cualitativas', to='academico.trimestre')),
            ],
            options={
                'verbose_name': 'Calificación Cualitativa',
                'verbose_name_plural': 'Calificaciones Cualitativas',
                'db_table': 'academico_calificaciones_cualitativas',
                'unique_together': {('estudiante', 'materia_curso', 'trimestre')},
            },
        ),
        migrations.CreateModel(
            name='PromedioTrimestre',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('promedio_insumos', nota()),
                ('ponderado_insumos', nota()),
                ('nota_proyecto', nota()),
                ('ponderado_proyecto', nota()),
                ('nota_examen', nota()),
                ('ponderado_examen', nota()),
                ('nota_final_trimestre', nota()),
                ('cualitativa', models.CharField(choices=CUALITATIVA, max_length=2)),
                ('observaciones', models.TextField(blank=True, null=True)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promedios_trimestre', to='academico.estudiante')),
                ('materia_curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promedios_trimestre', to='academico.materiacurso')),
                ('trimestre', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promedios', to='academico.trimestre')),
            ],
            options={
                'verbose_name': 'Promedio de Trimestre',
                'verbose_name_plural': 'Promedios de Trimestre',
                'db_table': 'academico_promedios_trimestre',
                'unique_together': {('estudiante', 'materia_curso', 'trimestre')},
            },
        ),
        migrations.CreateModel(
            name='PromedioPeriodo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nota_trimestre_1', nota(blank=True, null=True)),
                ('nota_trimestre_2', nota(blank=True, null=True)),
                ('nota_trimestre_3', nota(blank=True, null=True)),
                ('promedio_anual', nota(blank=True, null=True)),
                ('cualitativa_anual', models.CharField(blank=True, choices=CUALITATIVA, max_length=2, null=True)),
                ('en_supletorio', models.BooleanField(db_index=True, default=False)),
                ('nota_supletorio', nota(blank=True, null=True, validators=VALIDADORES_NOTA)),
                ('promedio_final', nota(blank=True, null=True)),
                ('cualitativa_final', models.CharField(blank=True, choices=CUALITATIVA, max_length=2, null=True)),
                ('estado', models.CharField(blank=True, choices=[('APROBADO', 'Aprobado'), ('SUPLETORIO', 'Supletorio'), ('REPROBADO', 'Reprobado')], max_length=20, null=True)),
                ('observaciones', models.TextField(blank=True, null=True)),
                ('fecha_creacion', models.DateTimeField(auto_now_add=True)),
                ('fecha_actualizacion', models.DateTimeField(auto_now=True)),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promedios_periodo', to='academico.estudiante')),
                ('materia_curso', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promedios_periodo', to='academico.materiacurso')),
                ('periodo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promedios', to='academico.periodolectivo')),
            ],
            options={
                'verbose_name': 'Promedio Anual',
                'verbose_name_plural': 'Promedios Anuales',
                'db_table': 'academico_promedios_periodo',
                'unique_together': {('estudiante', 'materia_curso', 'periodo')},
            },
        ),
    ]
