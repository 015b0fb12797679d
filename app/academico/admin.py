from django.contrib import admin, messages
from django.utils.html import format_html

from academico.exceptions import AcademicoException
from academico.models import (
    Curso, EstadoSupletorio, Estudiante, Materia, MateriaCurso, Matricula,
    PeriodoLectivo, PromedioPeriodo, PromedioTrimestre, TipoEvaluacion, Trimestre
)
from academico.services import ServiciosPeriodo, ServiciosSupletorio, ServiciosTrimestre
from institucional.auditoria import AuditoriaMixin

COLORES_ESTADO = {
    'ACTIVO': '#28a745',
    'ACTIVADO': '#28a745',
    'PENDIENTE': '#ffc107',
    'FINALIZADO': '#6c757d',
    'CERRADO': '#6c757d',
    'INACTIVO': '#6c757d',
    'RETIRADO': '#dc3545',
    'GRADUADO': '#007bff',
    'SIN_MATRICULA': '#17a2b8',
}


def etiqueta_estado(valor, texto):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px; font-weight: bold;">{}</span>',
        COLORES_ESTADO.get(valor, '#6c757d'), texto
    )


def mostrar_error(model_admin, request, error):
    model_admin.message_user(request, error.mensaje, level=messages.ERROR)
    for detalle in error.errores:
        texto = detalle.get('motivo') or detalle.get('docente_nombre') or str(detalle)
        if 'total_problemas' in detalle:
            texto = f"{texto}: {detalle['total_problemas']} pendientes"
        model_admin.message_user(request, texto, level=messages.WARNING)


class TipoEvaluacionInline(admin.TabularInline):
    model = TipoEvaluacion
    extra = 0
    max_num = 3


class TrimestreInline(admin.TabularInline):
    model = Trimestre
    extra = 0
    max_num = 3
    fields = ('numero', 'nombre', 'fecha_inicio', 'fecha_fin', 'estado')
    readonly_fields = ('estado',)


@admin.register(PeriodoLectivo)
class PeriodoLectivoAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'fecha_inicio', 'fecha_fin', 'estado_display', 'supletorio_display')
    list_filter = ('estado', 'estado_supletorio')
    search_fields = ('nombre',)
    readonly_fields = ('estado', 'estado_supletorio', 'fecha_creacion', 'fecha_actualizacion')
    inlines = [TrimestreInline, TipoEvaluacionInline]
    save_on_top = True
    actions = [
        'validar_cierre_action', 'finalizar_periodo_action',
        'activar_supletorios_action', 'cerrar_supletorios_action', 'reabrir_supletorios_action',
    ]

    def estado_display(self, obj):
        return etiqueta_estado(obj.estado, obj.get_estado_display())
    estado_display.short_description = 'Estado'

    def supletorio_display(self, obj):
        return etiqueta_estado(obj.estado_supletorio, obj.get_estado_supletorio_display())
    supletorio_display.short_description = 'Supletorios'

    def _un_periodo(self, request, queryset):
        if queryset.count() > 1:
            self.message_user(request, 'Seleccione un solo período.', level=messages.WARNING)
            return None
        return queryset.first()

    def validar_cierre_action(self, request, queryset):
        periodo = self._un_periodo(request, queryset)
        if periodo is None:
            return
        validacion = ServiciosPeriodo.validar_cierre_periodo(periodo)
        if validacion['puede_cerrar']:
            preview = validacion['preview']
            self.message_user(
                request,
                f"El período puede cerrarse. Matrículas a finalizar: {preview['total_matriculas_a_finalizar']}, "
                f"cursos a inactivar: {preview['total_cursos_a_inactivar']}.",
                level=messages.SUCCESS
            )
        for error in validacion['errores']:
            self.message_user(request, error, level=messages.ERROR)
        for advertencia in validacion['advertencias']:
            self.message_user(request, advertencia, level=messages.WARNING)
    validar_cierre_action.short_description = "Validar cierre del período"

    def finalizar_periodo_action(self, request, queryset):
        periodo = self._un_periodo(request, queryset)
        if periodo is None:
            return
        try:
            resultado = ServiciosPeriodo.finalizar_periodo(periodo, request.user)
        except AcademicoException as e:
            mostrar_error(self, request, e)
            return
        estadisticas = resultado['estadisticas']
        self.message_user(
            request,
            f"Período finalizado. Graduados: {estadisticas['estudiantes_graduados']} | "
            f"Sin matrícula: {estadisticas['estudiantes_sin_matricula']} | "
            f"Matrículas finalizadas: {estadisticas['matriculas_finalizadas']}",
            level=messages.SUCCESS
        )
        if resultado['advertencia']:
            self.message_user(request, resultado['advertencia'], level=messages.WARNING)
    finalizar_periodo_action.short_description = "Finalizar período lectivo"

    def _cambiar_supletorio(self, request, queryset, estado):
        periodo = self._un_periodo(request, queryset)
        if periodo is None:
            return
        resultado = ServiciosSupletorio.transicionar_supletorio(periodo, estado, request.user)
        if resultado['ok']:
            self.message_user(request, f"Supletorios en estado {estado}.", level=messages.SUCCESS)
        else:
            self.message_user(request, resultado['reason'], level=messages.ERROR)

    def activar_supletorios_action(self, request, queryset):
        self._cambiar_supletorio(request, queryset, EstadoSupletorio.ACTIVADO)
    activar_supletorios_action.short_description = "Activar supletorios"

    def cerrar_supletorios_action(self, request, queryset):
        self._cambiar_supletorio(request, queryset, EstadoSupletorio.CERRADO)
    cerrar_supletorios_action.short_description = "Cerrar supletorios"

    def reabrir_supletorios_action(self, request, queryset):
        self._cambiar_supletorio(request, queryset, EstadoSupletorio.PENDIENTE)
    reabrir_supletorios_action.short_description = "Regresar supletorios a pendiente"


@admin.register(Trimestre)
class TrimestreAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'periodo', 'fecha_inicio', 'fecha_fin', 'estado_display')
    list_filter = ('estado', 'periodo')
    readonly_fields = ('estado',)
    list_select_related = ('periodo',)
    actions = ['activar_trimestre_action', 'validar_cierre_action', 'finalizar_trimestre_action']

    def estado_display(self, obj):
        return etiqueta_estado(obj.estado, obj.get_estado_display())
    estado_display.short_description = 'Estado'

    def activar_trimestre_action(self, request, queryset):
        for trimestre in queryset:
            try:
                ServiciosTrimestre.activar_trimestre(trimestre, request.user)
            except AcademicoException as e:
                mostrar_error(self, request, e)
            else:
                self.message_user(request, f"{trimestre} activado.", level=messages.SUCCESS)
    activar_trimestre_action.short_description = "Activar trimestre"

    def validar_cierre_action(self, request, queryset):
        for trimestre in queryset:
            try:
                resultado = ServiciosTrimestre.validar_cierre_trimestre(trimestre)
            except AcademicoException as e:
                mostrar_error(self, request, e)
                continue
            estadisticas = resultado.estadisticas
            nivel = messages.SUCCESS if resultado.ok else messages.WARNING
            self.message_user(
                request,
                f"{trimestre}: {estadisticas['estudiantes_completos']}/{estadisticas['total_estudiantes']} "
                f"estudiantes completos ({estadisticas['porcentaje_completado']}%).",
                level=nivel
            )
            for grupo in resultado.problemas_por_docente:
                self.message_user(
                    request,
                    f"{grupo['docente_nombre']}: {grupo['total_problemas']} pendientes",
                    level=messages.WARNING
                )
    validar_cierre_action.short_description = "Validar cierre del trimestre"

    def finalizar_trimestre_action(self, request, queryset):
        for trimestre in queryset.order_by('numero'):
            try:
                resultado = ServiciosTrimestre.finalizar_trimestre(trimestre, request.user)
            except AcademicoException as e:
                mostrar_error(self, request, e)
                return
            self.message_user(
                request,
                f"{trimestre} finalizado: {resultado['promedios_generados']} promedios generados.",
                level=messages.SUCCESS
            )
    finalizar_trimestre_action.short_description = "Finalizar trimestre"


@admin.register(Materia)
class MateriaAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'codigo')
    search_fields = ('nombre', 'codigo')
    list_per_page = 50


@admin.register(Curso)
class CursoAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'periodo', 'tutor', 'estado_display')
    list_filter = ('estado', 'nivel', 'especialidad', 'periodo')
    search_fields = ('paralelo', 'tutor__apellidos', 'tutor__nombres')
    autocomplete_fields = ['tutor']
    list_select_related = ('periodo', 'tutor')

    def estado_display(self, obj):
        return etiqueta_estado(obj.estado, obj.get_estado_display())
    estado_display.short_description = 'Estado'


@admin.register(MateriaCurso)
class MateriaCursoAdmin(admin.ModelAdmin):
    list_display = ('materia', 'curso', 'docente', 'tipo_calificacion', 'estado')
    list_filter = ('estado', 'tipo_calificacion', 'periodo')
    search_fields = ('materia__nombre', 'docente__apellidos', 'docente__nombres')
    autocomplete_fields = ['materia', 'docente']
    list_select_related = ('materia', 'curso', 'docente')


@admin.register(Estudiante)
class EstudianteAdmin(admin.ModelAdmin):
    list_display = ('apellidos', 'nombres', 'cedula', 'estado_display', 'curso_actual')
    list_display_links = ('apellidos', 'nombres')
    list_filter = ('estado',)
    search_fields = ('nombres', 'apellidos', 'cedula')
    list_per_page = 50
    empty_value_display = '—'

    def estado_display(self, obj):
        return etiqueta_estado(obj.estado, obj.get_estado_display())
    estado_display.short_description = 'Estado'


@admin.register(Matricula)
class MatriculaAdmin(admin.ModelAdmin):
    list_display = ('numero_de_matricula', 'estudiante', 'curso', 'periodo', 'estado_display')
    list_filter = ('estado', 'origen', 'periodo')
    search_fields = ('numero_de_matricula', 'estudiante__apellidos', 'estudiante__cedula')
    readonly_fields = ('estado', 'fecha_retiro', 'motivo_retiro', 'fecha_creacion')
    autocomplete_fields = ['estudiante']
    list_select_related = ('estudiante', 'curso', 'periodo')

    def estado_display(self, obj):
        return etiqueta_estado(obj.estado, obj.get_estado_display())
    estado_display.short_description = 'Estado'


class PromedioSoloLecturaAdmin(AuditoriaMixin, admin.ModelAdmin):
    list_per_page = 100

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(PromedioTrimestre)
class PromedioTrimestreAdmin(PromedioSoloLecturaAdmin):
    list_display = ('estudiante', 'materia_curso', 'trimestre', 'nota_final_trimestre', 'cualitativa')
    list_filter = ('trimestre__periodo', 'trimestre', 'cualitativa')
    search_fields = ('estudiante__apellidos', 'estudiante__cedula')
    list_select_related = ('estudiante', 'materia_curso__materia', 'materia_curso__curso', 'trimestre__periodo')


@admin.register(PromedioPeriodo)
class PromedioPeriodoAdmin(PromedioSoloLecturaAdmin):
    list_display = (
        'estudiante', 'materia_curso', 'promedio_anual', 'en_supletorio',
        'nota_supletorio', 'promedio_final', 'estado'
    )
    list_filter = ('periodo', 'estado', 'en_supletorio')
    search_fields = ('estudiante__apellidos', 'estudiante__cedula')
    list_select_related = ('estudiante', 'materia_curso__materia', 'materia_curso__curso')
