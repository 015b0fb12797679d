"""
Utilidades para auditoría de cambios de datos.

El middleware deja el usuario y la IP del request en un thread local; las señales
de los modelos auditados (ver academico/signals.py) y el AuditoriaMixin del admin
los usan al registrar cada cambio en AuditoriaDatos.
"""
import logging
import threading
from datetime import date, datetime
from decimal import Decimal

from main.utils import obtener_ip_cliente

logger = logging.getLogger(__name__)

_thread_locals = threading.local()

CAMPOS_SENSIBLES = ('password', 'last_login', 'session_key')


def set_current_user(user):
    _thread_locals.user = user


def get_current_user():
    return getattr(_thread_locals, 'user', None)


def set_current_ip(ip):
    _thread_locals.ip = ip


def get_current_ip():
    return getattr(_thread_locals, 'ip', None)


def serializar_valor(valor):
    """Convierte un valor a formato serializable para JSON"""
    if valor is None:
        return None
    if isinstance(valor, (str, int, float, bool)):
        return valor
    if isinstance(valor, Decimal):
        # Las notas se guardan como texto para no perder los dos decimales
        return str(valor)
    if isinstance(valor, (date, datetime)):
        return valor.isoformat()
    if hasattr(valor, 'pk'):
        return str(valor.pk)
    return str(valor)


def obtener_valores_modelo(instance, campos_excluidos=None):
    """
    Obtiene un diccionario con los valores actuales del modelo.

    Args:
        instance: Instancia del modelo
        campos_excluidos: Lista de campos a excluir

    Returns:
        dict: Diccionario con los valores serializables
    """
    excluidos = set(campos_excluidos or []) | set(CAMPOS_SENSIBLES)
    valores = {}
    for field in instance._meta.fields:
        if field.name in excluidos:
            continue
        # attname evita una consulta extra por cada ForeignKey
        valores[field.name] = serializar_valor(getattr(instance, field.attname, None))
    return valores


def registrar_cambio(instance, tipo_accion, valores_anteriores=None, valores_nuevos=None, detalles=None):
    """
    Registra un cambio en la auditoría de datos.

    Args:
        instance: Instancia del modelo que cambió
        tipo_accion: TipoAccionDatos (CREAR, MODIFICAR, ELIMINAR)
        valores_anteriores: Diccionario con valores antes del cambio
        valores_nuevos: Diccionario con valores después del cambio
        detalles: Texto adicional con detalles del cambio
    """
    from institucional.models import AuditoriaDatos

    if instance._meta.model_name == 'auditoriadatos':
        return None

    usuario = get_current_user()
    registro = AuditoriaDatos.objects.create(
        usuario=usuario if usuario is not None and usuario.pk else None,
        tipo_accion=tipo_accion,
        modelo=f"{instance._meta.app_label}.{instance._meta.model_name}",
        objeto_id=str(instance.pk) if instance.pk else "N/A",
        objeto_repr=str(instance)[:255],
        valores_anteriores=valores_anteriores,
        valores_nuevos=valores_nuevos,
        ip_address=get_current_ip(),
        detalles=detalles
    )
    logger.debug("Auditoría %s %s #%s", tipo_accion, registro.modelo, registro.objeto_id)
    return registro


class AuditoriaMiddleware:
    """
    Captura el usuario y la IP de cada request para que las señales de auditoría
    sepan quién hizo el cambio.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        user = getattr(request, 'user', None)
        set_current_user(user if user is not None and user.is_authenticated else None)
        set_current_ip(obtener_ip_cliente(request))
        try:
            return self.get_response(request)
        finally:
            set_current_user(None)
            set_current_ip(None)


class AuditoriaMixin:
    """
    Mixin para ModelAdmin de modelos que no tienen señales de auditoría propias.
    """

    campos_auditoria_excluidos = []

    def save_model(self, request, obj, form, change):
        from institucional.models import TipoAccionDatos

        valores_anteriores = None
        if change:
            anterior = obj.__class__.objects.filter(pk=obj.pk).first()
            if anterior is not None:
                valores_anteriores = obtener_valores_modelo(anterior, self.campos_auditoria_excluidos)

        super().save_model(request, obj, form, change)
        valores_nuevos = obtener_valores_modelo(obj, self.campos_auditoria_excluidos)

        if not change:
            registrar_cambio(
                obj, TipoAccionDatos.CREAR,
                valores_nuevos=valores_nuevos,
                detalles=f"Creado por {request.user.email} desde el admin"
            )
        elif valores_anteriores != valores_nuevos:
            registrar_cambio(
                obj, TipoAccionDatos.MODIFICAR,
                valores_anteriores=valores_anteriores,
                valores_nuevos=valores_nuevos,
                detalles=f"Modificado por {request.user.email} desde el admin"
            )

    def delete_model(self, request, obj):
        from institucional.models import TipoAccionDatos

        registrar_cambio(
            obj, TipoAccionDatos.ELIMINAR,
            valores_anteriores=obtener_valores_modelo(obj, self.campos_auditoria_excluidos),
            detalles=f"Eliminado por {request.user.email} desde el admin"
        )
        super().delete_model(request, obj)
