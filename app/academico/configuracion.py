"""
Constantes configurables del cierre académico.

Se leen de ``settings.ACADEMICO`` en cada llamada para que puedan cambiarse
por institución (o con ``override_settings`` en las pruebas).
"""
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


POLITICA_INMEDIATA = 'INMEDIATA'
POLITICA_CONSERVAR_ACTIVO = 'CONSERVAR_ACTIVO'
POLITICAS_SIN_MATRICULA = (POLITICA_INMEDIATA, POLITICA_CONSERVAR_ACTIVO)

VALORES_POR_DEFECTO = {
    # Cortes inferiores de cada banda, de mayor a menor; lo que queda debajo es NA
    'ESCALA_CUALITATIVA': (('DA', '9.00'), ('AA', '7.00'), ('PA', '4.00')),
    'BANDA_INFERIOR': 'NA',
    # Intervalo [minimo, maximo) del promedio anual que habilita el supletorio
    'RANGO_SUPLETORIO': ('4.00', '7.00'),
    'NOTA_APROBACION_ANUAL': '7.00',
    'NOTA_APROBACION_SUPLETORIO': '7.00',
    'NOTA_MINIMA_GRADUACION': '7.00',
    'NIVEL_FINAL': 'TERCERO BACHILLERATO',
    'POLITICA_SIN_MATRICULA': POLITICA_INMEDIATA,
    'MAX_INTENTOS_RECUPERACION': 2,
    'NOTA_SIN_REFUERZO': '7.00',
}


class ConfiguracionAcademica:
    def __init__(self, valores):
        self.escala_cualitativa = tuple(
            (banda, Decimal(str(corte))) for banda, corte in valores['ESCALA_CUALITATIVA']
        )
        self.banda_inferior = valores['BANDA_INFERIOR']
        minimo, maximo = valores['RANGO_SUPLETORIO']
        self.rango_supletorio = (Decimal(str(minimo)), Decimal(str(maximo)))
        self.nota_aprobacion_anual = Decimal(str(valores['NOTA_APROBACION_ANUAL']))
        self.nota_aprobacion_supletorio = Decimal(str(valores['NOTA_APROBACION_SUPLETORIO']))
        self.nota_minima_graduacion = Decimal(str(valores['NOTA_MINIMA_GRADUACION']))
        self.nivel_final = valores['NIVEL_FINAL']
        self.politica_sin_matricula = valores['POLITICA_SIN_MATRICULA']
        self.max_intentos_recuperacion = int(valores['MAX_INTENTOS_RECUPERACION'])
        self.nota_sin_refuerzo = Decimal(str(valores['NOTA_SIN_REFUERZO']))

        cortes = [corte for _, corte in self.escala_cualitativa]
        if cortes != sorted(cortes, reverse=True):
            raise ImproperlyConfigured("ESCALA_CUALITATIVA debe ordenarse de mayor a menor.")
        if self.politica_sin_matricula not in POLITICAS_SIN_MATRICULA:
            raise ImproperlyConfigured(
                f"POLITICA_SIN_MATRICULA debe ser una de {', '.join(POLITICAS_SIN_MATRICULA)}."
            )


def obtener_configuracion():
    valores = dict(VALORES_POR_DEFECTO)
    valores.update(getattr(settings, 'ACADEMICO', {}))
    return ConfiguracionAcademica(valores)
