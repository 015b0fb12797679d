from django.db import models
from django.contrib.auth.models import AbstractUser, BaseUserManager


class CustomUserManager(BaseUserManager):
    """Manager de usuarios que se identifican por email en lugar de username."""

    def _create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('El email es obligatorio')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('El superusuario debe tener is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('El superusuario debe tener is_superuser=True.')

        return self._create_user(email, password, **extra_fields)


class Usuario(AbstractUser):
    username = None
    email = models.EmailField(unique=True)
    habilitado = models.BooleanField(default=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = CustomUserManager()

    class Meta:
        db_table = 'institucional_usuarios'
        verbose_name = 'Usuario'
        verbose_name_plural = 'Usuarios'

    def __str__(self):
        return self.email


class Persona(models.Model):
    cedula = models.CharField(max_length=20, unique=True)
    nombres = models.CharField(max_length=100)
    apellidos = models.CharField(max_length=100)
    email = models.EmailField(null=True, blank=True)

    class Meta:
        db_table = 'institucional_personas'
        verbose_name = 'Persona'
        verbose_name_plural = 'Personas'

    @property
    def nombre_completo(self):
        return f'{self.apellidos} {self.nombres}'

    def __str__(self):
        return f"{self.nombre_completo} ({self.cedula})"


class Docente(Persona):
    usuario = models.OneToOneField(
        'Usuario', on_delete=models.SET_NULL,
        null=True, blank=True, related_name='docente'
    )
    titulo = models.CharField(max_length=150, blank=True, null=True)

    class Meta:
        db_table = 'institucional_docentes'
        verbose_name = 'Docente'
        verbose_name_plural = 'Docentes'


class TipoAccionDatos(models.TextChoices):
    CREAR = 'CREAR', 'Creación'
    MODIFICAR = 'MODIFICAR', 'Modificación'
    ELIMINAR = 'ELIMINAR', 'Eliminación'


class AuditoriaDatos(models.Model):
    """
    Registro de cambios sobre los datos académicos.
    Guarda quién hizo el cambio, cuándo y qué valores cambiaron.
    """
    usuario = models.ForeignKey(
        'Usuario',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='cambios_realizados'
    )
    tipo_accion = models.CharField(max_length=20, choices=TipoAccionDatos.choices)
    fecha_hora = models.DateTimeField(auto_now_add=True, db_index=True)

    modelo = models.CharField(max_length=100, db_index=True)
    objeto_id = models.CharField(max_length=100)
    objeto_repr = models.CharField(max_length=255)

    valores_anteriores = models.JSONField(null=True, blank=True)
    valores_nuevos = models.JSONField(null=True, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    detalles = models.TextField(blank=True, null=True)

    class Meta:
        db_table = 'institucional_auditoria_datos'
        verbose_name = 'Auditoría de Datos'
        verbose_name_plural = 'Auditoría de Datos'
        ordering = ['-fecha_hora']
        indexes = [
            models.Index(fields=['-fecha_hora'], name='audit_datos_fecha_idx'),
            models.Index(fields=['modelo', '-fecha_hora'], name='audit_datos_modelo_idx'),
        ]

    def __str__(self):
        return f"{self.modelo} - {self.get_tipo_accion_display()} - {self.fecha_hora:%d/%m/%Y %H:%M:%S}"

    @property
    def cambios_resumidos(self):
        """Resumen legible de los campos que cambiaron"""
        if self.tipo_accion == TipoAccionDatos.CREAR:
            return "Registro creado"
        if self.tipo_accion == TipoAccionDatos.ELIMINAR:
            return "Registro eliminado"
        if self.valores_anteriores and self.valores_nuevos:
            cambios = [
                f"{campo}: '{self.valores_anteriores.get(campo)}' → '{valor}'"
                for campo, valor in self.valores_nuevos.items()
                if campo in self.valores_anteriores and self.valores_anteriores[campo] != valor
            ]
            return "; ".join(cambios) if cambios else "Sin cambios detectados"
        return "Sin detalles"
