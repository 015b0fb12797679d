from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator

from institucional.models import Persona

VALIDADORES_NOTA = [MinValueValidator(0), MaxValueValidator(10)]


class EstadoPeriodo(models.TextChoices):
    ACTIVO = 'ACTIVO', 'Activo'
    FINALIZADO = 'FINALIZADO', 'Finalizado'


class EstadoSupletorio(models.TextChoices):
    PENDIENTE = 'PENDIENTE', 'Pendiente'
    ACTIVADO = 'ACTIVADO', 'Activado'
    CERRADO = 'CERRADO', 'Cerrado'


class EstadoTrimestre(models.TextChoices):
    PENDIENTE = 'PENDIENTE', 'Pendiente'
    ACTIVO = 'ACTIVO', 'Activo'
    FINALIZADO = 'FINALIZADO', 'Finalizado'


class NombreTrimestre(models.TextChoices):
    PRIMER_TRIMESTRE = 'PRIMER TRIMESTRE', 'Primer trimestre'
    SEGUNDO_TRIMESTRE = 'SEGUNDO TRIMESTRE', 'Segundo trimestre'
    TERCER_TRIMESTRE = 'TERCER TRIMESTRE', 'Tercer trimestre'


class NombreTipoEvaluacion(models.TextChoices):
    INSUMOS = 'INSUMOS', 'Insumos'
    PROYECTO = 'PROYECTO', 'Proyecto'
    EXAMEN = 'EXAMEN', 'Examen'


class NivelCurso(models.TextChoices):
    OCTAVO = 'OCTAVO', '8vo de Básica'
    NOVENO = 'NOVENO', '9no de Básica'
    DECIMO = 'DECIMO', '10mo de Básica'
    PRIMERO_BACHILLERATO = 'PRIMERO BACHILLERATO', '1ro de Bachillerato'
    SEGUNDO_BACHILLERATO = 'SEGUNDO BACHILLERATO', '2do de Bachillerato'
    TERCERO_BACHILLERATO = 'TERCERO BACHILLERATO', '3ro de Bachillerato'


class EspecialidadCurso(models.TextChoices):
    BASICA = 'BASICA', 'Básica'
    TECNICO = 'TECNICO', 'Técnico'
    CIENCIAS = 'CIENCIAS', 'Ciencias'


class EstadoCurso(models.TextChoices):
    ACTIVO = 'ACTIVO', 'Activo'
    INACTIVO = 'INACTIVO', 'Inactivo'


class TipoCalificacionMateria(models.TextChoices):
    CUANTITATIVA = 'CUANTITATIVA', 'Cuantitativa'
    CUALITATIVA = 'CUALITATIVA', 'Cualitativa'


class EstadoEstudiante(models.TextChoices):
    ACTIVO = 'ACTIVO', 'Activo'
    SIN_MATRICULA = 'SIN_MATRICULA', 'Sin matrícula'
    INACTIVO_TEMPORAL = 'INACTIVO_TEMPORAL', 'Inactivo temporal'
    GRADUADO = 'GRADUADO', 'Graduado'
    RETIRADO = 'RETIRADO', 'Retirado'


class EstadoMatricula(models.TextChoices):
    ACTIVO = 'ACTIVO', 'Activo'
    RETIRADO = 'RETIRADO', 'Retirado'
    FINALIZADO = 'FINALIZADO', 'Finalizado'


class OrigenMatricula(models.TextChoices):
    DISTRITO = 'DISTRITO', 'Distrito'
    MANUAL = 'MANUAL', 'Manual'


class EstadoInsumo(models.TextChoices):
    BORRADOR = 'BORRADOR', 'Borrador'
    ACTIVO = 'ACTIVO', 'Activo'
    PUBLICADO = 'PUBLICADO', 'Publicado'
    CERRADO = 'CERRADO', 'Cerrado'


class CalificacionComponente(models.TextChoices):
    MAS_A = '+A', '+A'
    A = 'A', 'A'
    A_MENOS = 'A-', 'A-'
    B_MAS = 'B+', 'B+'
    B = 'B', 'B'
    B_MENOS = 'B-', 'B-'
    C_MAS = 'C+', 'C+'
    C = 'C', 'C'
    C_MENOS = 'C-', 'C-'
    D = 'D', 'D'


class Cualitativa(models.TextChoices):
    DA = 'DA', 'Domina los aprendizajes'
    AA = 'AA', 'Alcanza los aprendizajes'
    PA = 'PA', 'Próximo a alcanzar los aprendizajes'
    NA = 'NA', 'No alcanza los aprendizajes'


class EstadoPromedioAnual(models.TextChoices):
    APROBADO = 'APROBADO', 'Aprobado'
    SUPLETORIO = 'SUPLETORIO', 'Supletorio'
    REPROBADO = 'REPROBADO', 'Reprobado'


class RolCalificacion(models.TextChoices):
    ADMINISTRADOR = 'ADMINISTRADOR', 'Administrador'
    DOCENTE = 'DOCENTE', 'Docente'
    TUTOR = 'TUTOR', 'Tutor'


class PeriodoLectivo(models.Model):
    nombre = models.CharField(max_length=100)
    fecha_inicio = models.DateField()
    fecha_fin = models.DateField()
    estado = models.CharField(
        max_length=20, choices=EstadoPeriodo.choices,
        default=EstadoPeriodo.ACTIVO, db_index=True
    )
    estado_supletorio = models.CharField(
        max_length=20, choices=EstadoSupletorio.choices,
        default=EstadoSupletorio.PENDIENTE
    )
    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_periodos_lectivos'
        verbose_name = 'Período Lectivo'
        verbose_name_plural = 'Períodos Lectivos'
        ordering = ['-fecha_inicio']
        constraints = [
            models.UniqueConstraint(
                fields=['estado'],
                condition=models.Q(estado='ACTIVO'),
                name='periodo_lectivo_unico_activo',
            ),
        ]

    def __str__(self):
        return f"{self.nombre} ({self.get_estado_display()})"

    def clean(self):
        if self.fecha_inicio and self.fecha_fin and self.fecha_fin <= self.fecha_inicio:
            raise ValidationError("La fecha de fin debe ser mayor a la fecha de inicio.")

    def save(self, *args, **kwargs):
        # Un período finalizado no vuelve a activo, aunque se guarde desde el admin.
        if self.pk:
            from .estados import MAQUINA_PERIODO
            anterior = PeriodoLectivo.objects.filter(pk=self.pk).values_list('estado', flat=True).first()
            if anterior is not None and anterior != self.estado:
                MAQUINA_PERIODO.validar(anterior, self.estado)
        super().save(*args, **kwargs)

    @property
    def esta_activo(self):
        return self.estado == EstadoPeriodo.ACTIVO


class Trimestre(models.Model):
    periodo = models.ForeignKey(PeriodoLectivo, on_delete=models.CASCADE, related_name='trimestres')
    numero = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(3)])
    nombre = models.CharField(max_length=30, choices=NombreTrimestre.choices)
    fecha_inicio = models.DateField()
    fecha_fin = models.DateField()
    estado = models.CharField(
        max_length=20, choices=EstadoTrimestre.choices,
        default=EstadoTrimestre.PENDIENTE, db_index=True
    )

    class Meta:
        db_table = 'academico_trimestres'
        verbose_name = 'Trimestre'
        verbose_name_plural = 'Trimestres'
        ordering = ['periodo', 'numero']
        unique_together = ('periodo', 'numero')

    def __str__(self):
        return f"{self.get_nombre_display()} - {self.periodo.nombre}"

    def clean(self):
        if self.fecha_inicio and self.fecha_fin and self.fecha_fin <= self.fecha_inicio:
            raise ValidationError("La fecha de fin del trimestre debe ser mayor a la de inicio.")

    @property
    def es_ultimo(self):
        return self.numero == 3


class TipoEvaluacion(models.Model):
    periodo = models.ForeignKey(PeriodoLectivo, on_delete=models.CASCADE, related_name='tipos_evaluacion')
    nombre = models.CharField(max_length=20, choices=NombreTipoEvaluacion.choices)
    porcentaje = models.DecimalField(
        max_digits=5, decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )

    class Meta:
        db_table = 'academico_tipos_evaluacion'
        verbose_name = 'Tipo de Evaluación'
        verbose_name_plural = 'Tipos de Evaluación'
        unique_together = ('periodo', 'nombre')

    def __str__(self):
        return f"{self.nombre} {self.porcentaje}% - {self.periodo.nombre}"


class Materia(models.Model):
    nombre = models.CharField(max_length=100)
    codigo = models.CharField(max_length=20, unique=True)
    descripcion = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'academico_materias'
        verbose_name = 'Materia'
        verbose_name_plural = 'Materias'

    def __str__(self):
        return f"{self.nombre} ({self.codigo})"


class Curso(models.Model):
    nivel = models.CharField(max_length=30, choices=NivelCurso.choices)
    paralelo = models.CharField(max_length=2)
    especialidad = models.CharField(max_length=20, choices=EspecialidadCurso.choices, default=EspecialidadCurso.BASICA)
    periodo = models.ForeignKey(PeriodoLectivo, on_delete=models.CASCADE, related_name='cursos')
    tutor = models.ForeignKey(
        'institucional.Docente', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='cursos_tutorados'
    )
    estado = models.CharField(max_length=20, choices=EstadoCurso.choices, default=EstadoCurso.ACTIVO, db_index=True)

    class Meta:
        db_table = 'academico_cursos'
        verbose_name = 'Curso'
        verbose_name_plural = 'Cursos'
        unique_together = ('nivel', 'paralelo', 'especialidad', 'periodo')

    def __str__(self):
        return f"{self.get_nivel_display()} {self.paralelo} - {self.get_especialidad_display()}"


class MateriaCurso(models.Model):
    materia = models.ForeignKey(Materia, on_delete=models.CASCADE, related_name='materias_curso')
    curso = models.ForeignKey(Curso, on_delete=models.CASCADE, related_name='materias_curso')
    periodo = models.ForeignKey(PeriodoLectivo, on_delete=models.CASCADE, related_name='materias_curso')
    docente = models.ForeignKey(
        'institucional.Docente', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='materias_curso'
    )
    tipo_calificacion = models.CharField(
        max_length=20, choices=TipoCalificacionMateria.choices,
        default=TipoCalificacionMateria.CUANTITATIVA
    )
    estado = models.CharField(
        max_length=20, choices=EstadoCurso.choices,
        default=EstadoCurso.ACTIVO, db_index=True
    )

    class Meta:
        db_table = 'academico_materias_curso'
        verbose_name = 'Materia del Curso'
        verbose_name_plural = 'Materias del Curso'
        unique_together = ('materia', 'curso')
        indexes = [
            models.Index(fields=['periodo', 'estado'], name='materia_curso_periodo_idx'),
        ]

    def __str__(self):
        return f"{self.materia.nombre} - {self.curso}"

    def clean(self):
        if self.curso_id and self.periodo_id and self.curso.periodo_id != self.periodo_id:
            raise ValidationError("La materia debe pertenecer al mismo período que su curso.")

    @property
    def es_cuantitativa(self):
        return self.tipo_calificacion == TipoCalificacionMateria.CUANTITATIVA


class Estudiante(Persona):
    estado = models.CharField(
        max_length=20, choices=EstadoEstudiante.choices,
        default=EstadoEstudiante.ACTIVO, db_index=True
    )
    fecha_de_nacimiento = models.DateField(null=True, blank=True)
    direccion = models.CharField(max_length=200, null=True, blank=True)

    class Meta:
        db_table = 'academico_estudiantes'
        verbose_name = 'Estudiante'
        verbose_name_plural = 'Estudiantes'

    @property
    def matricula_activa(self):
        return self.matriculas.filter(estado=EstadoMatricula.ACTIVO).select_related('curso').first()

    @property
    def curso_actual(self):
        matricula = self.matricula_activa
        return matricula.curso if matricula else None


class Matricula(models.Model):
    estudiante = models.ForeignKey(Estudiante, on_delete=models.CASCADE, related_name='matriculas')
    curso = models.ForeignKey(Curso, on_delete=models.CASCADE, related_name='matriculas')
    periodo = models.ForeignKey(PeriodoLectivo, on_delete=models.CASCADE, related_name='matriculas')
    numero_de_matricula = models.CharField(max_length=30, blank=True)
    origen = models.CharField(max_length=20, choices=OrigenMatricula.choices, default=OrigenMatricula.MANUAL)
    estado = models.CharField(
        max_length=20, choices=EstadoMatricula.choices,
        default=EstadoMatricula.ACTIVO, db_index=True
    )
    fecha_retiro = models.DateTimeField(null=True, blank=True)
    motivo_retiro = models.TextField(blank=True, null=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'academico_matriculas'
        verbose_name = 'Matrícula'
        verbose_name_plural = 'Matrículas'
        unique_together = ('estudiante', 'periodo')
        indexes = [
            models.Index(fields=['curso', 'estado'], name='matricula_curso_estado_idx'),
        ]

    def __str__(self):
        return f"{self.estudiante.nombre_completo} - {self.curso} ({self.estado})"

    def clean(self):
        if self.curso_id and self.periodo_id and self.curso.periodo_id != self.periodo_id:
            raise ValidationError("El curso de la matrícula no pertenece al período indicado.")

    def save(self, *args, **kwargs):
        if not self.numero_de_matricula and self.periodo_id:
            self.numero_de_matricula = f"{self.periodo_id}-{self.estudiante.cedula}"
        super().save(*args, **kwargs)


class Insumo(models.Model):
    materia_curso = models.ForeignKey(MateriaCurso, on_delete=models.CASCADE, related_name='insumos')
    trimestre = models.ForeignKey(Trimestre, on_delete=models.CASCADE, related_name='insumos')
    nombre = models.CharField(max_length=100)
    estado = models.CharField(max_length=20, choices=EstadoInsumo.choices, default=EstadoInsumo.ACTIVO)
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'academico_insumos'
        verbose_name = 'Insumo'
        verbose_name_plural = 'Insumos'

    def __str__(self):
        return f"{self.nombre} - {self.materia_curso}"


class CalificacionInsumo(models.Model):
    insumo = models.ForeignKey(Insumo, on_delete=models.CASCADE, related_name='calificaciones')
    estudiante = models.ForeignKey(Estudiante, on_delete=models.CASCADE, related_name='calificaciones_insumo')
    nota_original = models.DecimalField(max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA)
    nota_final = models.DecimalField(
        max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA,
        help_text='Nota vigente luego de las recuperaciones'
    )
    observaciones = models.TextField(blank=True, null=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_calificaciones_insumo'
        verbose_name = 'Calificación de Insumo'
        verbose_name_plural = 'Calificaciones de Insumos'
        unique_together = ('insumo', 'estudiante')

    def __str__(self):
        return f"{self.estudiante.nombre_completo} - {self.insumo.nombre}: {self.nota_final}"


class RecuperacionInsumo(models.Model):
    calificacion = models.ForeignKey(CalificacionInsumo, on_delete=models.CASCADE, related_name='recuperaciones')
    nota_recuperacion = models.DecimalField(max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA)
    intento = models.PositiveSmallIntegerField()
    observaciones = models.TextField(blank=True, null=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'academico_recuperaciones_insumo'
        verbose_name = 'Recuperación de Insumo'
        verbose_name_plural = 'Recuperaciones de Insumos'
        unique_together = ('calificacion', 'intento')
        ordering = ['intento']


class CalificacionProyecto(models.Model):
    estudiante = models.ForeignKey(Estudiante, on_delete=models.CASCADE, related_name='calificaciones_proyecto')
    materia_curso = models.ForeignKey(MateriaCurso, on_delete=models.CASCADE, related_name='calificaciones_proyecto')
    trimestre = models.ForeignKey(Trimestre, on_delete=models.CASCADE, related_name='calificaciones_proyecto')
    calificacion_proyecto = models.DecimalField(max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA)
    observaciones = models.TextField(blank=True, null=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_calificaciones_proyecto'
        verbose_name = 'Calificación de Proyecto'
        verbose_name_plural = 'Calificaciones de Proyecto'
        unique_together = ('estudiante', 'materia_curso', 'trimestre')


class CalificacionExamen(models.Model):
    estudiante = models.ForeignKey(Estudiante, on_delete=models.CASCADE, related_name='calificaciones_examen')
    materia_curso = models.ForeignKey(MateriaCurso, on_delete=models.CASCADE, related_name='calificaciones_examen')
    trimestre = models.ForeignKey(Trimestre, on_delete=models.CASCADE, related_name='calificaciones_examen')
    calificacion_examen = models.DecimalField(max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA)
    nota_final = models.DecimalField(
        max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA,
        help_text='Nota vigente luego de la recuperación'
    )
    observaciones = models.TextField(blank=True, null=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_calificaciones_examen'
        verbose_name = 'Calificación de Examen'
        verbose_name_plural = 'Calificaciones de Examen'
        unique_together = ('estudiante', 'materia_curso', 'trimestre')


class RecuperacionExamen(models.Model):
    calificacion_examen = models.OneToOneField(
        CalificacionExamen, on_delete=models.CASCADE, related_name='recuperacion'
    )
    segundo_examen = models.DecimalField(max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA)
    trabajo_refuerzo = models.DecimalField(
        max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA,
        null=True, blank=True
    )
    observaciones = models.TextField(blank=True, null=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_recuperaciones_examen'
        verbose_name = 'Recuperación de Examen'
        verbose_name_plural = 'Recuperaciones de Examen'


class CalificacionCualitativa(models.Model):
    estudiante = models.ForeignKey(Estudiante, on_delete=models.CASCADE, related_name='calificaciones_cualitativas')
    materia_curso = models.ForeignKey(MateriaCurso, on_delete=models.CASCADE, related_name='calificaciones_cualitativas')
    trimestre = models.ForeignKey(Trimestre, on_delete=models.CASCADE, related_name='calificaciones_cualitativas')
    calificacion = models.CharField(max_length=2, choices=CalificacionComponente.choices, null=True, blank=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_calificaciones_cualitativas'
        verbose_name = 'Calificación Cualitativa'
        verbose_name_plural = 'Calificaciones Cualitativas'
        unique_together = ('estudiante', 'materia_curso', 'trimestre')


class PromedioTrimestre(models.Model):
    """Promedio derivado de un estudiante en una materia para un trimestre finalizado."""
    estudiante = models.ForeignKey(Estudiante, on_delete=models.CASCADE, related_name='promedios_trimestre')
    materia_curso = models.ForeignKey(MateriaCurso, on_delete=models.CASCADE, related_name='promedios_trimestre')
    trimestre = models.ForeignKey(Trimestre, on_delete=models.CASCADE, related_name='promedios')
    promedio_insumos = models.DecimalField(max_digits=4, decimal_places=2)
    ponderado_insumos = models.DecimalField(max_digits=4, decimal_places=2)
    nota_proyecto = models.DecimalField(max_digits=4, decimal_places=2)
    ponderado_proyecto = models.DecimalField(max_digits=4, decimal_places=2)
    nota_examen = models.DecimalField(max_digits=4, decimal_places=2)
    ponderado_examen = models.DecimalField(max_digits=4, decimal_places=2)
    nota_final_trimestre = models.DecimalField(max_digits=4, decimal_places=2)
    cualitativa = models.CharField(max_length=2, choices=Cualitativa.choices)
    observaciones = models.TextField(blank=True, null=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_promedios_trimestre'
        verbose_name = 'Promedio de Trimestre'
        verbose_name_plural = 'Promedios de Trimestre'
        unique_together = ('estudiante', 'materia_curso', 'trimestre')

    def __str__(self):
        return f"{self.estudiante.nombre_completo} - {self.materia_curso.materia.nombre}: {self.nota_final_trimestre}"


class PromedioPeriodo(models.Model):
    """Promedio anual de un estudiante en una materia, con su eventual supletorio."""
    estudiante = models.ForeignKey(Estudiante, on_delete=models.CASCADE, related_name='promedios_periodo')
    materia_curso = models.ForeignKey(MateriaCurso, on_delete=models.CASCADE, related_name='promedios_periodo')
    periodo = models.ForeignKey(PeriodoLectivo, on_delete=models.CASCADE, related_name='promedios')
    nota_trimestre_1 = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    nota_trimestre_2 = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    nota_trimestre_3 = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    promedio_anual = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    cualitativa_anual = models.CharField(max_length=2, choices=Cualitativa.choices, null=True, blank=True)
    en_supletorio = models.BooleanField(default=False, db_index=True)
    nota_supletorio = models.DecimalField(
        max_digits=4, decimal_places=2, validators=VALIDADORES_NOTA,
        null=True, blank=True
    )
    promedio_final = models.DecimalField(max_digits=4, decimal_places=2, null=True, blank=True)
    cualitativa_final = models.CharField(max_length=2, choices=Cualitativa.choices, null=True, blank=True)
    estado = models.CharField(max_length=20, choices=EstadoPromedioAnual.choices, null=True, blank=True)
    observaciones = models.TextField(blank=True, null=True)
    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_actualizacion = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'academico_promedios_periodo'
        verbose_name = 'Promedio Anual'
        verbose_name_plural = 'Promedios Anuales'
        unique_together = ('estudiante', 'materia_curso', 'periodo')

    def __str__(self):
        return f"{self.estudiante.nombre_completo} - {self.materia_curso.materia.nombre}: {self.nota_efectiva}"

    @property
    def nota_efectiva(self):
        """Nota que cuenta para aprobar: la del supletorio si se rindió, si no la anual."""
        if self.nota_supletorio is not None and self.promedio_final is not None:
            return self.promedio_final
        return self.promedio_anual
