from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from institucional.auditoria import obtener_valores_modelo, registrar_cambio
from institucional.models import TipoAccionDatos

from .models import Estudiante, Matricula, PeriodoLectivo, PromedioPeriodo, Trimestre

# Modelos cuyo ciclo de vida queda en la auditoría de datos
MODELOS_AUDITABLES = (PeriodoLectivo, Trimestre, Matricula, Estudiante, PromedioPeriodo)


@receiver(pre_save)
def auditoria_pre_save(sender, instance, **kwargs):
    if sender in MODELOS_AUDITABLES and instance.pk:
        anterior = sender.objects.filter(pk=instance.pk).first()
        instance._valores_anteriores = obtener_valores_modelo(anterior) if anterior else None


@receiver(post_save)
def auditoria_post_save(sender, instance, created, **kwargs):
    if sender not in MODELOS_AUDITABLES:
        return
    valores_nuevos = obtener_valores_modelo(instance)
    if created:
        registrar_cambio(instance, TipoAccionDatos.CREAR, valores_nuevos=valores_nuevos)
        return
    valores_anteriores = getattr(instance, '_valores_anteriores', None)
    if valores_anteriores != valores_nuevos:
        registrar_cambio(
            instance,
            TipoAccionDatos.MODIFICAR,
            valores_anteriores=valores_anteriores,
            valores_nuevos=valores_nuevos
        )


@receiver(post_delete)
def auditoria_post_delete(sender, instance, **kwargs):
    if sender in MODELOS_AUDITABLES:
        registrar_cambio(instance, TipoAccionDatos.ELIMINAR, valores_anteriores=obtener_valores_modelo(instance))
