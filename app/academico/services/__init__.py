from .calificaciones import ServiciosCalificacion
from .elegibilidad import ServiciosElegibilidad
from .matriculas import ServiciosMatricula
from .periodos import ServiciosPeriodo
from .promedios import ServiciosPromedios
from .supletorios import ServiciosSupletorio
from .trimestres import ResultadoCierreTrimestre, ServiciosTrimestre

__all__ = [
    'ResultadoCierreTrimestre',
    'ServiciosCalificacion',
    'ServiciosElegibilidad',
    'ServiciosMatricula',
    'ServiciosPeriodo',
    'ServiciosPromedios',
    'ServiciosSupletorio',
    'ServiciosTrimestre',
]
