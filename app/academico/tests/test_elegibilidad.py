from decimal import Decimal

import pytest

from academico.exceptions import PrecondicionError, TransicionInvalidaError
from academico.models import (
    EstadoCurso, EstadoEstudiante, EstadoMatricula, NivelCurso, PromedioPeriodo
)
from academico.services import ServiciosElegibilidad, ServiciosMatricula
from academico.tests import fabricas


@pytest.mark.django_db
class TestElegibilidad:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.periodo = fabricas.crear_periodo()
        self.curso = fabricas.crear_curso(self.periodo, NivelCurso.TERCERO_BACHILLERATO)
        self.materias = [
            fabricas.crear_materia_curso(self.curso, codigo, nombre)
            for codigo, nombre in (('MAT', 'Matemática'), ('LEN', 'Lengua'), ('FIS', 'Física'))
        ]
        self.vera = fabricas.crear_estudiante('1301', 'Ana', 'Vera', self.curso)

    def registrar_promedios(self, *notas):
        for materia_curso, nota in zip(self.materias, notas):
            PromedioPeriodo.objects.create(
                estudiante=self.vera, materia_curso=materia_curso, periodo=self.periodo,
                promedio_anual=nota, promedio_final=nota
            )

    def test_una_materia_bajo_siete_no_gradua(self):
        self.registrar_promedios(Decimal('7.00'), Decimal('8.50'), Decimal('6.90'))

        resultado = ServiciosElegibilidad.evaluar_elegibilidad(self.vera, self.periodo)

        assert resultado['es_ultimo_nivel']
        assert not resultado['graduado']
        assert {d['materia']: d['cumple'] for d in resultado['promedios_por_materia']} == {
            'Matemática (MAT)': True,
            'Lengua (LEN)': True,
            'Física (FIS)': False,
        }

    def test_todas_aprobadas(self):
        self.registrar_promedios(Decimal('7.00'), Decimal('8.50'), Decimal('9.90'))

        assert ServiciosElegibilidad.evaluar_elegibilidad(self.vera, self.periodo)['graduado']

    def test_promedio_faltante_descalifica(self):
        self.registrar_promedios(Decimal('9.00'), Decimal('9.00'))

        assert not ServiciosElegibilidad.evaluar_elegibilidad(self.vera, self.periodo)['graduado']

    def test_materia_inactiva_no_se_exige_con_periodo_activo(self):
        self.registrar_promedios(Decimal('9.00'), Decimal('9.00'))
        self.materias[2].estado = EstadoCurso.INACTIVO
        self.materias[2].save()

        assert ServiciosElegibilidad.evaluar_elegibilidad(self.vera, self.periodo)['graduado']

    def test_otro_nivel_no_se_gradua(self):
        decimo = fabricas.crear_curso(self.periodo, NivelCurso.DECIMO)
        mora = fabricas.crear_estudiante('1302', 'Luis', 'Mora', decimo)

        resultado = ServiciosElegibilidad.evaluar_elegibilidad(mora, self.periodo)

        assert not resultado['es_ultimo_nivel']
        assert not resultado['graduado']

    def test_sin_matricula(self):
        otro = fabricas.crear_estudiante('1399')

        resultado = ServiciosElegibilidad.evaluar_elegibilidad(otro, self.periodo)

        assert resultado == {
            'estudiante_id': otro.pk,
            'graduado': False,
            'es_ultimo_nivel': False,
            'promedios_por_materia': [],
        }


@pytest.mark.django_db
class TestRetiroMatricula:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.periodo = fabricas.crear_periodo()
        self.curso = fabricas.crear_curso(self.periodo)
        self.vera = fabricas.crear_estudiante('1301', 'Ana', 'Vera', self.curso)
        self.matricula = self.vera.matriculas.get()

    def test_retiro_requiere_motivo(self):
        with pytest.raises(PrecondicionError):
            ServiciosMatricula.retirar_matricula(self.matricula, '   ')

        self.matricula.refresh_from_db()
        assert self.matricula.estado == EstadoMatricula.ACTIVO

    def test_retiro(self):
        matricula = ServiciosMatricula.retirar_matricula(self.matricula, 'Cambio de ciudad')

        assert matricula.estado == EstadoMatricula.RETIRADO
        assert matricula.motivo_retiro == 'Cambio de ciudad'
        assert matricula.fecha_retiro is not None
        self.vera.refresh_from_db()
        assert self.vera.estado == EstadoEstudiante.RETIRADO
        assert self.vera.curso_actual is None

    def test_no_se_retira_dos_veces(self):
        ServiciosMatricula.retirar_matricula(self.matricula, 'Cambio de ciudad')

        with pytest.raises(TransicionInvalidaError):
            ServiciosMatricula.retirar_matricula(self.matricula, 'Otra vez')

    def test_retirado_no_es_elegible(self):
        ServiciosMatricula.retirar_matricula(self.matricula, 'Cambio de ciudad')

        resultado = ServiciosElegibilidad.evaluar_elegibilidad(self.vera, self.periodo)

        assert not resultado['graduado']
        assert resultado['promedios_por_materia'] == []
