"""
Tablas de transición de los ciclos de vida académicos.

Todas las validaciones de cambio de estado pasan por una MaquinaEstados,
de modo que una transición no listada se rechaza en un único lugar.
"""
from .exceptions import TransicionInvalidaError
from .models import EstadoMatricula, EstadoPeriodo, EstadoSupletorio, EstadoTrimestre


class MaquinaEstados:
    def __init__(self, nombre, estados, transiciones, mensajes=None):
        self.nombre = nombre
        self.estados = frozenset(str(e) for e in estados)
        self.transiciones = frozenset((str(a), str(b)) for a, b in transiciones)
        # Mensajes específicos para transiciones prohibidas conocidas
        self.mensajes = {(str(a), str(b)): m for (a, b), m in (mensajes or {}).items()}

        desconocidos = {e for par in self.transiciones for e in par} - self.estados
        if desconocidos:
            raise ValueError(f"Estados desconocidos en la tabla de {nombre}: {desconocidos}")

    def es_valida(self, actual, nuevo):
        return (str(actual), str(nuevo)) in self.transiciones

    def destinos(self, actual):
        return sorted(nuevo for (origen, nuevo) in self.transiciones if origen == str(actual))

    def validar(self, actual, nuevo):
        actual, nuevo = str(actual), str(nuevo)
        if nuevo not in self.estados:
            raise TransicionInvalidaError(
                f"'{nuevo}' no es un estado válido de {self.nombre}.",
                errores=[{'estado_actual': actual, 'estado_solicitado': nuevo}]
            )
        if self.es_valida(actual, nuevo):
            return
        if actual == nuevo:
            mensaje = f"El {self.nombre} ya se encuentra en estado {actual}."
        else:
            mensaje = self.mensajes.get(
                (actual, nuevo),
                f"No se permite cambiar el {self.nombre} de {actual} a {nuevo}."
            )
        raise TransicionInvalidaError(
            mensaje,
            errores=[{
                'estado_actual': actual,
                'estado_solicitado': nuevo,
                'permitidos': self.destinos(actual),
            }]
        )


MAQUINA_PERIODO = MaquinaEstados(
    'período lectivo',
    EstadoPeriodo.values,
    {(EstadoPeriodo.ACTIVO, EstadoPeriodo.FINALIZADO)},
    mensajes={
        (EstadoPeriodo.FINALIZADO, EstadoPeriodo.ACTIVO):
            'Un período finalizado no puede ser reactivado.',
    },
)

MAQUINA_TRIMESTRE = MaquinaEstados(
    'trimestre',
    EstadoTrimestre.values,
    {
        (EstadoTrimestre.PENDIENTE, EstadoTrimestre.ACTIVO),
        (EstadoTrimestre.ACTIVO, EstadoTrimestre.FINALIZADO),
    },
    mensajes={
        (EstadoTrimestre.PENDIENTE, EstadoTrimestre.FINALIZADO):
            'No se puede finalizar un trimestre pendiente; primero debe activarse.',
    },
)

MAQUINA_SUPLETORIO = MaquinaEstados(
    'estado de supletorios',
    EstadoSupletorio.values,
    {
        (EstadoSupletorio.PENDIENTE, EstadoSupletorio.ACTIVADO),
        (EstadoSupletorio.ACTIVADO, EstadoSupletorio.CERRADO),
        (EstadoSupletorio.ACTIVADO, EstadoSupletorio.PENDIENTE),
        (EstadoSupletorio.CERRADO, EstadoSupletorio.ACTIVADO),
    },
    mensajes={
        (EstadoSupletorio.PENDIENTE, EstadoSupletorio.CERRADO):
            'No se pueden cerrar supletorios que aún están pendientes.',
        (EstadoSupletorio.CERRADO, EstadoSupletorio.PENDIENTE):
            'No se puede regresar de CERRADO a PENDIENTE; primero deben reabrirse los supletorios.',
    },
)

MAQUINA_MATRICULA = MaquinaEstados(
    'estado de matrícula',
    EstadoMatricula.values,
    {
        (EstadoMatricula.ACTIVO, EstadoMatricula.RETIRADO),
        (EstadoMatricula.ACTIVO, EstadoMatricula.FINALIZADO),
    },
)
