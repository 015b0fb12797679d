"""
Cálculos de notas sin acceso a la base de datos.

Todas las funciones trabajan con Decimal y reciben los datos ya consultados,
por lo que pueden ejecutarse en paralelo para pares (estudiante, materia)
distintos sin compartir estado.
"""
from decimal import Decimal, ROUND_HALF_UP

from .configuracion import obtener_configuracion
from .exceptions import ConfiguracionPesosError
from .models import EstadoPromedioAnual, NombreTipoEvaluacion

CIEN = Decimal('100')
CENTESIMA = Decimal('0.01')

COMPONENTES = (
    NombreTipoEvaluacion.INSUMOS,
    NombreTipoEvaluacion.PROYECTO,
    NombreTipoEvaluacion.EXAMEN,
)


def a_decimal(valor):
    if valor is None:
        return None
    if isinstance(valor, Decimal):
        return valor
    return Decimal(str(valor))


def redondear(valor):
    if valor is None:
        return None
    return a_decimal(valor).quantize(CENTESIMA, rounding=ROUND_HALF_UP)


def promedio(valores):
    """Media aritmética; None si no hay valores."""
    numeros = [a_decimal(v) for v in valores if v is not None]
    if not numeros:
        return None
    return sum(numeros, Decimal('0')) / len(numeros)


def validar_pesos(pesos):
    """
    Verifica que los porcentajes INSUMOS/PROYECTO/EXAMEN existan y sumen 100.

    Args:
        pesos: dict {nombre_tipo: porcentaje}

    Returns:
        dict con los porcentajes como Decimal

    Raises:
        ConfiguracionPesosError si falta algún tipo o la suma no es exactamente 100
    """
    errores = []
    normalizados = {}
    for componente in COMPONENTES:
        valor = pesos.get(componente, pesos.get(str(componente)))
        if valor is None:
            errores.append({'tipo_evaluacion': str(componente), 'problema': 'Porcentaje no configurado'})
            continue
        valor = a_decimal(valor)
        if valor < 0 or valor > CIEN:
            errores.append({'tipo_evaluacion': str(componente), 'problema': f'Porcentaje fuera de rango: {valor}'})
        normalizados[str(componente)] = valor

    if errores:
        raise ConfiguracionPesosError(
            "La configuración de porcentajes de evaluación está incompleta o es inválida.",
            errores=errores
        )

    total = sum(normalizados.values(), Decimal('0'))
    if total != CIEN:
        raise ConfiguracionPesosError(
            f"Los porcentajes de evaluación deben sumar 100. Suma actual: {total}",
            errores=[{'suma': str(total), **{k: str(v) for k, v in normalizados.items()}}]
        )
    return normalizados


def calcular_cualitativa(nota, config=None):
    """Banda cualitativa (DA/AA/PA/NA) de una nota numérica; None si no hay nota."""
    if nota is None:
        return None
    config = config or obtener_configuracion()
    nota = a_decimal(nota)
    for banda, corte in config.escala_cualitativa:
        if nota >= corte:
            return banda
    return config.banda_inferior


class ResultadoTrimestre:
    """Promedio de un estudiante en una materia para un trimestre."""

    CAMPOS = (
        'promedio_insumos', 'ponderado_insumos',
        'nota_proyecto', 'ponderado_proyecto',
        'nota_examen', 'ponderado_examen',
        'nota_final_trimestre', 'cualitativa',
    )

    def __init__(self, **valores):
        for campo in self.CAMPOS:
            setattr(self, campo, valores.get(campo))
        self.componentes_faltantes = list(valores.get('componentes_faltantes', []))

    @property
    def completo(self):
        return self.nota_final_trimestre is not None

    def como_dict(self):
        datos = {campo: getattr(self, campo) for campo in self.CAMPOS}
        datos['componentes_faltantes'] = self.componentes_faltantes
        return datos

    def __repr__(self):
        return f"<ResultadoTrimestre final={self.nota_final_trimestre} faltan={self.componentes_faltantes}>"


def calcular_promedio_trimestre(notas_insumos, notas_proyecto, notas_examen, pesos, config=None):
    """
    Calcula el promedio trimestral ponderado.

    Cada componente es la media de sus notas; un componente sin notas queda en None
    (no en cero) y en ese caso la nota final tampoco se calcula.

    Args:
        notas_insumos, notas_proyecto, notas_examen: iterables de notas (0-10)
        pesos: dict {INSUMOS|PROYECTO|EXAMEN: porcentaje}

    Returns:
        ResultadoTrimestre
    """
    config = config or obtener_configuracion()
    pesos = validar_pesos(pesos)

    promedios = {
        NombreTipoEvaluacion.INSUMOS: redondear(promedio(notas_insumos)),
        NombreTipoEvaluacion.PROYECTO: redondear(promedio(notas_proyecto)),
        NombreTipoEvaluacion.EXAMEN: redondear(promedio(notas_examen)),
    }
    ponderados = {}
    faltantes = []
    for componente, valor in promedios.items():
        if valor is None:
            ponderados[componente] = None
            faltantes.append(str(componente))
        else:
            ponderados[componente] = redondear(valor * pesos[str(componente)] / CIEN)

    nota_final = None
    if not faltantes:
        nota_final = sum(ponderados.values(), Decimal('0'))

    return ResultadoTrimestre(
        promedio_insumos=promedios[NombreTipoEvaluacion.INSUMOS],
        ponderado_insumos=ponderados[NombreTipoEvaluacion.INSUMOS],
        nota_proyecto=promedios[NombreTipoEvaluacion.PROYECTO],
        ponderado_proyecto=ponderados[NombreTipoEvaluacion.PROYECTO],
        nota_examen=promedios[NombreTipoEvaluacion.EXAMEN],
        ponderado_examen=ponderados[NombreTipoEvaluacion.EXAMEN],
        nota_final_trimestre=nota_final,
        cualitativa=calcular_cualitativa(nota_final, config),
        componentes_faltantes=faltantes,
    )


def calcular_fila_promedios(filas, campos=None, config=None):
    """
    Fila "PROMEDIOS" de una tabla de curso: media de cada campo entre estudiantes,
    ignorando los None. Un campo sin ningún valor queda en None.

    Args:
        filas: lista de dicts (o ResultadoTrimestre) por estudiante
        campos: campos numéricos a promediar
    """
    campos = campos or [c for c in ResultadoTrimestre.CAMPOS if c != 'cualitativa']
    fila = {}
    for campo in campos:
        valores = []
        for f in filas:
            valor = f.get(campo) if isinstance(f, dict) else getattr(f, campo, None)
            if valor is not None:
                valores.append(valor)
        fila[campo] = redondear(promedio(valores))
    if 'nota_final_trimestre' in fila:
        fila['cualitativa'] = calcular_cualitativa(fila['nota_final_trimestre'], config)
    return fila


def calcular_nota_insumo(nota_original, notas_recuperacion):
    """Nota vigente de un insumo: media de la original y sus recuperaciones."""
    return redondear(promedio([nota_original, *notas_recuperacion]))


def calcular_nota_examen(calificacion_examen, segundo_examen=None, trabajo_refuerzo=None, config=None):
    """
    Nota vigente del examen trimestral.

    Sin recuperación es la original. Con nota original menor a la nota sin refuerzo
    se promedian original, segundo examen y trabajo de refuerzo; en otro caso solo
    original y segundo examen.
    """
    if segundo_examen is None:
        return redondear(calificacion_examen)
    config = config or obtener_configuracion()
    if a_decimal(calificacion_examen) < config.nota_sin_refuerzo:
        return redondear(promedio([calificacion_examen, segundo_examen, trabajo_refuerzo]))
    return redondear(promedio([calificacion_examen, segundo_examen]))


def calcular_promedio_anual(notas_trimestres, total_trimestres=3):
    """Media de las notas finales trimestrales; None si falta alguna."""
    notas = list(notas_trimestres)
    if len(notas) != total_trimestres or any(n is None for n in notas):
        return None
    return redondear(promedio(notas))


def clasificar_promedio_anual(promedio_anual, config=None):
    """
    Returns:
        tuple (estado: EstadoPromedioAnual | None, en_supletorio: bool)
    """
    if promedio_anual is None:
        return None, False
    config = config or obtener_configuracion()
    minimo, maximo = config.rango_supletorio
    valor = a_decimal(promedio_anual)
    if minimo <= valor < maximo:
        return EstadoPromedioAnual.SUPLETORIO, True
    if valor >= config.nota_aprobacion_anual:
        return EstadoPromedioAnual.APROBADO, False
    return EstadoPromedioAnual.REPROBADO, False


def calcular_resultado_supletorio(promedio_anual, nota_supletorio, config=None):
    """
    Promedio final tras el supletorio: media entre el promedio anual y la nota
    del supletorio. Si alcanza la nota de aprobación se registra como esa nota.

    Returns:
        tuple (promedio_final: Decimal, aprobado: bool)
    """
    config = config or obtener_configuracion()
    final = redondear(promedio([promedio_anual, nota_supletorio]))
    aprobado = final >= config.nota_aprobacion_supletorio
    if aprobado:
        final = min(final, config.nota_aprobacion_supletorio)
    return final, aprobado


def evaluar_graduacion(notas_por_materia, config=None):
    """
    Un estudiante de último nivel se gradúa solo si todas las materias requeridas
    tienen nota anual mayor o igual a la mínima. Una nota faltante descalifica.

    Args:
        notas_por_materia: dict {materia: nota anual | None}

    Returns:
        tuple (graduado: bool, detalle: list[dict])
    """
    config = config or obtener_configuracion()
    detalle = []
    for materia, nota in notas_por_materia.items():
        nota = a_decimal(nota)
        cumple = nota is not None and nota >= config.nota_minima_graduacion
        detalle.append({'materia': materia, 'nota': nota, 'cumple': cumple})
    graduado = bool(detalle) and all(d['cumple'] for d in detalle)
    return graduado, detalle


SIN_DOCENTE = 'Sin docente asignado'


def describir_problema(estudiante, materia, curso, componentes_faltantes):
    if not componentes_faltantes:
        return f"{estudiante} no tiene calificación cualitativa en {materia} ({curso})"
    etiqueta = 'nota' if len(componentes_faltantes) == 1 else 'notas'
    return f"{estudiante} sin {etiqueta} de {', '.join(componentes_faltantes)} en {materia} ({curso})"


def agrupar_problemas_por_docente(problemas):
    """
    Agrupa una lista plana de problemas de completitud por docente.

    Cada problema es un dict con al menos ``docente_id``, ``docente_nombre`` y
    ``descripcion``. Los problemas de materias sin docente quedan en un único
    grupo con ``docente_id`` None.

    Returns:
        list de dicts {docente_id, docente_nombre, total_problemas, problemas, detalle}
        ordenada por nombre de docente, con el grupo sin docente al final.
    """
    grupos = {}
    for problema in problemas:
        clave = problema.get('docente_id')
        grupo = grupos.setdefault(clave, {
            'docente_id': clave,
            'docente_nombre': problema.get('docente_nombre') or SIN_DOCENTE,
            'total_problemas': 0,
            'problemas': [],
            'detalle': [],
        })
        grupo['total_problemas'] += 1
        grupo['problemas'].append(problema['descripcion'])
        grupo['detalle'].append(problema)
    return sorted(grupos.values(), key=lambda g: (g['docente_id'] is None, g['docente_nombre']))
