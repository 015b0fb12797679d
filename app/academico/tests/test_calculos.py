from decimal import Decimal

import pytest
from django.test import override_settings

from academico import calculos
from academico.exceptions import ConfiguracionPesosError
from academico.models import EstadoPromedioAnual

PESOS = {'INSUMOS': 30, 'PROYECTO': 30, 'EXAMEN': 40}


class TestPromedioTrimestre:
    def test_promedio_ponderado_ejemplo(self):
        resultado = calculos.calcular_promedio_trimestre([8], [7], [6], PESOS)

        assert resultado.ponderado_insumos == Decimal('2.40')
        assert resultado.ponderado_proyecto == Decimal('2.10')
        assert resultado.ponderado_examen == Decimal('2.40')
        assert resultado.nota_final_trimestre == Decimal('6.90')
        assert resultado.cualitativa == 'PA'
        assert resultado.completo

    def test_promedio_insumos_es_media_de_notas(self):
        resultado = calculos.calcular_promedio_trimestre([7, 8, 10], [7], [7], PESOS)

        assert resultado.promedio_insumos == Decimal('8.33')

    def test_componente_faltante_deja_final_en_none(self):
        resultado = calculos.calcular_promedio_trimestre([8, 9], [7], [], PESOS)

        assert resultado.nota_examen is None
        assert resultado.ponderado_examen is None
        assert resultado.nota_final_trimestre is None
        assert resultado.cualitativa is None
        assert resultado.componentes_faltantes == ['EXAMEN']
        assert not resultado.completo

    def test_sin_notas_faltan_todos_los_componentes(self):
        resultado = calculos.calcular_promedio_trimestre([], [], [], PESOS)

        assert resultado.componentes_faltantes == ['INSUMOS', 'PROYECTO', 'EXAMEN']

    def test_redondeo_half_up(self):
        # 8.125 se redondea a 8.13
        assert calculos.redondear(Decimal('8.125')) == Decimal('8.13')
        assert calculos.redondear(Decimal('8.124')) == Decimal('8.12')

    def test_final_es_suma_de_ponderados_redondeados(self):
        resultado = calculos.calcular_promedio_trimestre([7.33], [8.67], [9.11], PESOS)

        suma = resultado.ponderado_insumos + resultado.ponderado_proyecto + resultado.ponderado_examen
        assert resultado.nota_final_trimestre == suma


class TestValidarPesos:
    def test_pesos_que_suman_cien(self):
        pesos = calculos.validar_pesos({'INSUMOS': '60', 'PROYECTO': '20', 'EXAMEN': '20'})

        assert pesos == {'INSUMOS': Decimal('60'), 'PROYECTO': Decimal('20'), 'EXAMEN': Decimal('20')}

    def test_pesos_que_no_suman_cien(self):
        with pytest.raises(ConfiguracionPesosError) as excinfo:
            calculos.validar_pesos({'INSUMOS': 30, 'PROYECTO': 30, 'EXAMEN': 39})

        assert '99' in excinfo.value.mensaje

    def test_peso_faltante(self):
        with pytest.raises(ConfiguracionPesosError) as excinfo:
            calculos.validar_pesos({'INSUMOS': 70, 'PROYECTO': 30})

        assert excinfo.value.errores[0]['tipo_evaluacion'] == 'EXAMEN'

    def test_peso_negativo(self):
        with pytest.raises(ConfiguracionPesosError):
            calculos.validar_pesos({'INSUMOS': 110, 'PROYECTO': 30, 'EXAMEN': -40})

    def test_pesos_invalidos_bloquean_el_calculo(self):
        with pytest.raises(ConfiguracionPesosError):
            calculos.calcular_promedio_trimestre([8], [8], [8], {'INSUMOS': 50, 'PROYECTO': 30, 'EXAMEN': 30})


class TestCualitativa:
    @pytest.mark.parametrize('nota,banda', [
        ('10.00', 'DA'),
        ('9.00', 'DA'),
        ('8.99', 'AA'),
        ('7.00', 'AA'),
        ('6.99', 'PA'),
        ('4.00', 'PA'),
        ('3.99', 'NA'),
        ('0.00', 'NA'),
    ])
    def test_bandas(self, nota, banda):
        assert calculos.calcular_cualitativa(Decimal(nota)) == banda

    def test_sin_nota(self):
        assert calculos.calcular_cualitativa(None) is None

    @override_settings(ACADEMICO={'ESCALA_CUALITATIVA': (('DA', '9.50'), ('AA', '7.00'), ('PA', '5.00'))})
    def test_cortes_configurables(self):
        assert calculos.calcular_cualitativa(Decimal('9.40')) == 'AA'
        assert calculos.calcular_cualitativa(Decimal('4.50')) == 'NA'


class TestFilaPromedios:
    def test_media_ignorando_nulos(self):
        filas = [
            {'nota_final_trimestre': Decimal('8.00'), 'nota_examen': Decimal('6.00')},
            {'nota_final_trimestre': Decimal('6.00'), 'nota_examen': None},
            {'nota_final_trimestre': None, 'nota_examen': Decimal('9.00')},
        ]

        fila = calculos.calcular_fila_promedios(filas, campos=['nota_final_trimestre', 'nota_examen'])

        assert fila['nota_final_trimestre'] == Decimal('7.00')
        assert fila['nota_examen'] == Decimal('7.50')
        assert fila['cualitativa'] == 'AA'

    def test_campo_sin_valores_queda_en_none(self):
        fila = calculos.calcular_fila_promedios([{'nota_proyecto': None}], campos=['nota_proyecto'])

        assert fila['nota_proyecto'] is None

    def test_acepta_resultados_de_trimestre(self):
        filas = [
            calculos.calcular_promedio_trimestre([8], [7], [6], PESOS),
            calculos.calcular_promedio_trimestre([10], [10], [10], PESOS),
        ]

        fila = calculos.calcular_fila_promedios(filas)

        assert fila['nota_final_trimestre'] == Decimal('8.45')


class TestRecuperaciones:
    def test_nota_insumo_con_recuperaciones(self):
        assert calculos.calcular_nota_insumo(Decimal('5'), [Decimal('7')]) == Decimal('6.00')
        assert calculos.calcular_nota_insumo(Decimal('5'), [Decimal('7'), Decimal('9')]) == Decimal('7.00')

    def test_nota_insumo_sin_recuperaciones(self):
        assert calculos.calcular_nota_insumo(Decimal('6.5'), []) == Decimal('6.50')

    def test_examen_bajo_con_refuerzo(self):
        nota = calculos.calcular_nota_examen(Decimal('5'), Decimal('8'), Decimal('9'))

        assert nota == Decimal('7.33')

    def test_examen_sin_refuerzo(self):
        nota = calculos.calcular_nota_examen(Decimal('7.5'), Decimal('9.5'))

        assert nota == Decimal('8.50')

    def test_examen_sin_recuperacion(self):
        assert calculos.calcular_nota_examen(Decimal('6.25')) == Decimal('6.25')


class TestPromedioAnual:
    def test_promedio_de_tres_trimestres(self):
        notas = [Decimal('7.00'), Decimal('8.00'), Decimal('6.50')]

        assert calculos.calcular_promedio_anual(notas) == Decimal('7.17')

    def test_trimestre_faltante(self):
        assert calculos.calcular_promedio_anual([Decimal('7'), None, Decimal('8')]) is None
        assert calculos.calcular_promedio_anual([Decimal('7'), Decimal('8')]) is None

    @pytest.mark.parametrize('nota,estado,en_supletorio', [
        ('7.00', EstadoPromedioAnual.APROBADO, False),
        ('6.99', EstadoPromedioAnual.SUPLETORIO, True),
        ('4.00', EstadoPromedioAnual.SUPLETORIO, True),
        ('3.99', EstadoPromedioAnual.REPROBADO, False),
    ])
    def test_clasificacion(self, nota, estado, en_supletorio):
        assert calculos.clasificar_promedio_anual(Decimal(nota)) == (estado, en_supletorio)

    def test_clasificacion_sin_promedio(self):
        assert calculos.clasificar_promedio_anual(None) == (None, False)


class TestSupletorio:
    def test_aprobado_se_registra_con_la_nota_minima(self):
        final, aprobado = calculos.calcular_resultado_supletorio(Decimal('5.00'), Decimal('10.00'))

        assert aprobado
        assert final == Decimal('7.00')

    def test_justo_en_el_umbral(self):
        final, aprobado = calculos.calcular_resultado_supletorio(Decimal('5.00'), Decimal('9.00'))

        assert aprobado
        assert final == Decimal('7.00')

    def test_reprobado_conserva_la_media(self):
        final, aprobado = calculos.calcular_resultado_supletorio(Decimal('5.00'), Decimal('8.00'))

        assert not aprobado
        assert final == Decimal('6.50')


class TestGraduacion:
    def test_una_materia_bajo_el_minimo_impide_graduarse(self):
        graduado, detalle = calculos.evaluar_graduacion({
            'Matemática': Decimal('7.0'),
            'Lengua': Decimal('8.5'),
            'Física': Decimal('6.9'),
        })

        assert not graduado
        assert [d['cumple'] for d in detalle] == [True, True, False]

    def test_todas_las_materias_aprobadas(self):
        graduado, _ = calculos.evaluar_graduacion({'Matemática': Decimal('7.00'), 'Lengua': Decimal('9.10')})

        assert graduado

    def test_nota_faltante_descalifica(self):
        graduado, detalle = calculos.evaluar_graduacion({'Matemática': Decimal('9'), 'Lengua': None})

        assert not graduado
        assert detalle[1] == {'materia': 'Lengua', 'nota': None, 'cumple': False}

    def test_sin_materias_no_se_gradua(self):
        assert calculos.evaluar_graduacion({}) == (False, [])


class TestAgruparProblemas:
    def test_agrupa_por_docente_y_deja_sin_docente_al_final(self):
        problemas = [
            {'docente_id': None, 'docente_nombre': None, 'descripcion': 'p1'},
            {'docente_id': 2, 'docente_nombre': 'Zambrano Luis', 'descripcion': 'p2'},
            {'docente_id': 1, 'docente_nombre': 'Andrade Ana', 'descripcion': 'p3'},
            {'docente_id': 2, 'docente_nombre': 'Zambrano Luis', 'descripcion': 'p4'},
        ]

        grupos = calculos.agrupar_problemas_por_docente(problemas)

        assert [g['docente_nombre'] for g in grupos] == ['Andrade Ana', 'Zambrano Luis', calculos.SIN_DOCENTE]
        assert grupos[1]['total_problemas'] == 2
        assert grupos[1]['problemas'] == ['p2', 'p4']

    def test_descripcion_del_problema(self):
        texto = calculos.describir_problema('Vera Ana', 'Física', '10mo A', ['EXAMEN'])

        assert texto == 'Vera Ana sin nota de EXAMEN en Física (10mo A)'
