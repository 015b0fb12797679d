"""Excepciones personalizadas para el módulo académico"""


class AcademicoException(Exception):
    """Excepción base para errores académicos.

    Además del mensaje, cada excepción puede llevar una lista de errores
    estructurados (diccionarios) para que la interfaz pueda indicar qué
    docente, estudiante o materia está involucrado.
    """
    codigo = 'ERROR_ACADEMICO'

    def __init__(self, mensaje, errores=None):
        super().__init__(mensaje)
        self.mensaje = mensaje
        self.errores = list(errores or [])

    def como_dict(self):
        return {
            'ok': False,
            'codigo': self.codigo,
            'reason': self.mensaje,
            'errores': self.errores,
        }


class ConfiguracionPesosError(AcademicoException):
    """Se lanza cuando los porcentajes de evaluación del período no suman 100"""
    codigo = 'CONFIGURACION'


class DatosIncompletosError(AcademicoException):
    """Se lanza cuando faltan componentes para calcular el promedio de un estudiante"""
    codigo = 'DATOS_INCOMPLETOS'


class TransicionInvalidaError(AcademicoException):
    """Se lanza cuando se intenta un cambio de estado no permitido"""
    codigo = 'TRANSICION_INVALIDA'


class PrecondicionError(AcademicoException):
    """Se lanza cuando no se cumplen las condiciones previas de una operación"""
    codigo = 'PRECONDICION'


class TipoCalificacionInvalidoError(AcademicoException):
    """Se lanza cuando la materia no admite el tipo de calificación registrado"""
    codigo = 'TIPO_CALIFICACION'


class RangoCalificacionInvalidoError(AcademicoException):
    """Se lanza cuando la calificación está fuera del rango permitido"""
    codigo = 'RANGO_CALIFICACION'


class TrimestreNoEditableError(AcademicoException):
    """Se lanza cuando se intenta calificar en un trimestre que no está activo"""
    codigo = 'TRIMESTRE_NO_EDITABLE'


class PermisoCalificacionError(AcademicoException):
    """Se lanza cuando el rol actual no puede registrar la calificación"""
    codigo = 'PERMISO'


class RecuperacionNoPermitidaError(AcademicoException):
    """Se lanza cuando se agotaron los intentos de recuperación o faltan datos"""
    codigo = 'RECUPERACION'


class SupletorioNoHabilitadoError(AcademicoException):
    """Se lanza cuando no se puede registrar la nota de supletorio"""
    codigo = 'SUPLETORIO'
