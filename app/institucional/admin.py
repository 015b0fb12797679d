from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from institucional.auditoria import AuditoriaMixin
from institucional.models import AuditoriaDatos, Docente, Usuario


def icono_booleano(valor):
    if valor:
        return format_html('<span style="color: green; font-size: 16px;">✓</span>')
    return format_html('<span style="color: red; font-size: 16px;">✗</span>')


@admin.register(Usuario)
class UsuarioAdmin(BaseUserAdmin):
    list_display = ('email', 'docente_display', 'habilitado_display', 'is_staff_display', 'is_superuser_display')
    search_fields = ('email', 'docente__nombres', 'docente__apellidos', 'docente__cedula')
    list_filter = ('is_staff', 'is_superuser', 'habilitado', 'groups')
    ordering = ('email',)
    list_per_page = 50
    save_on_top = True
    empty_value_display = '—'

    fieldsets = (
        (None, {'fields': ('email', 'password', 'habilitado')}),
        ('Permisos', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'habilitado', 'groups', 'is_staff', 'is_superuser'),
        }),
    )

    def docente_display(self, obj):
        docente = getattr(obj, 'docente', None)
        return docente.nombre_completo if docente else '—'
    docente_display.short_description = 'Docente'

    def habilitado_display(self, obj):
        return icono_booleano(obj.habilitado)
    habilitado_display.short_description = 'Habilitado'

    def is_staff_display(self, obj):
        return icono_booleano(obj.is_staff)
    is_staff_display.short_description = 'Staff'

    def is_superuser_display(self, obj):
        return icono_booleano(obj.is_superuser)
    is_superuser_display.short_description = 'Superusuario'


@admin.register(Docente)
class DocenteAdmin(AuditoriaMixin, admin.ModelAdmin):
    list_display = ('apellidos', 'nombres', 'cedula', 'titulo', 'usuario_asociado')
    list_display_links = ('apellidos', 'nombres')
    search_fields = ('nombres', 'apellidos', 'cedula', 'usuario__email')
    autocomplete_fields = ['usuario']
    list_select_related = ('usuario',)
    list_per_page = 50
    save_on_top = True
    empty_value_display = '—'

    fieldsets = (
        ('Datos Personales', {
            'fields': ('nombres', 'apellidos', 'cedula', 'email', 'titulo')
        }),
        ('Usuario Asociado', {
            'fields': ('usuario',)
        }),
    )

    def usuario_asociado(self, obj):
        return obj.usuario.email if obj.usuario else '—'
    usuario_asociado.short_description = 'Usuario'


@admin.register(AuditoriaDatos)
class AuditoriaDatosAdmin(admin.ModelAdmin):
    list_display = ('fecha_hora', 'usuario_display', 'tipo_accion_display', 'modelo', 'objeto_repr', 'cambios_cortos')
    list_filter = ('tipo_accion', 'modelo', 'fecha_hora')
    search_fields = ('modelo', 'objeto_repr', 'detalles', 'usuario__email')
    readonly_fields = (
        'usuario', 'tipo_accion', 'fecha_hora', 'modelo', 'objeto_id',
        'objeto_repr', 'valores_anteriores', 'valores_nuevos', 'ip_address', 'detalles'
    )
    date_hierarchy = 'fecha_hora'
    ordering = ('-fecha_hora',)
    list_select_related = ('usuario',)
    list_per_page = 100
    empty_value_display = '—'

    fieldsets = (
        ('Información General', {
            'fields': ('fecha_hora', 'usuario', 'tipo_accion', 'ip_address')
        }),
        ('Objeto Afectado', {
            'fields': ('modelo', 'objeto_id', 'objeto_repr')
        }),
        ('Cambios Realizados', {
            'fields': ('valores_anteriores', 'valores_nuevos', 'detalles'),
            'classes': ('collapse',)
        }),
    )

    def tipo_accion_display(self, obj):
        colors = {
            'CREAR': '#28a745',
            'MODIFICAR': '#ffc107',
            'ELIMINAR': '#dc3545'
        }
        color = colors.get(obj.tipo_accion, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px; font-weight: bold;">{}</span>',
            color, obj.get_tipo_accion_display()
        )
    tipo_accion_display.short_description = 'Acción'

    def usuario_display(self, obj):
        if obj.usuario:
            return obj.usuario.email
        return '(Sistema/Anónimo)'
    usuario_display.short_description = 'Usuario'

    def cambios_cortos(self, obj):
        resumen = obj.cambios_resumidos
        if len(resumen) > 80:
            return resumen[:80] + '...'
        return resumen
    cambios_cortos.short_description = 'Cambios'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
