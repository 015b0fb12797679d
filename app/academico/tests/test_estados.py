import pytest

from academico.estados import MAQUINA_PERIODO, MAQUINA_SUPLETORIO, MAQUINA_TRIMESTRE, MaquinaEstados
from academico.exceptions import TransicionInvalidaError
from academico.models import EstadoPeriodo, EstadoSupletorio, EstadoTrimestre


class TestMaquinaEstados:

    @pytest.mark.parametrize('actual,nuevo', [
        (EstadoSupletorio.PENDIENTE, EstadoSupletorio.ACTIVADO),
        (EstadoSupletorio.ACTIVADO, EstadoSupletorio.CERRADO),
        (EstadoSupletorio.ACTIVADO, EstadoSupletorio.PENDIENTE),
        (EstadoSupletorio.CERRADO, EstadoSupletorio.ACTIVADO),
    ])
    def test_transiciones_de_supletorio_permitidas(self, actual, nuevo):
        MAQUINA_SUPLETORIO.validar(actual, nuevo)

    @pytest.mark.parametrize('actual,nuevo', [
        (EstadoSupletorio.PENDIENTE, EstadoSupletorio.CERRADO),
        (EstadoSupletorio.CERRADO, EstadoSupletorio.PENDIENTE),
        (EstadoSupletorio.CERRADO, EstadoSupletorio.CERRADO),
    ])
    def test_transiciones_de_supletorio_prohibidas(self, actual, nuevo):
        with pytest.raises(TransicionInvalidaError):
            MAQUINA_SUPLETORIO.validar(actual, nuevo)

    def test_error_informa_destinos_permitidos(self):
        with pytest.raises(TransicionInvalidaError) as excinfo:
            MAQUINA_SUPLETORIO.validar('PENDIENTE', 'CERRADO')

        assert excinfo.value.errores == [{
            'estado_actual': 'PENDIENTE',
            'estado_solicitado': 'CERRADO',
            'permitidos': ['ACTIVADO'],
        }]

    def test_periodo_no_se_reactiva(self):
        with pytest.raises(TransicionInvalidaError) as excinfo:
            MAQUINA_PERIODO.validar(EstadoPeriodo.FINALIZADO, EstadoPeriodo.ACTIVO)

        assert excinfo.value.mensaje == 'Un período finalizado no puede ser reactivado.'

    def test_trimestre_avanza_sin_saltos(self):
        assert MAQUINA_TRIMESTRE.es_valida(EstadoTrimestre.PENDIENTE, EstadoTrimestre.ACTIVO)
        assert not MAQUINA_TRIMESTRE.es_valida(EstadoTrimestre.PENDIENTE, EstadoTrimestre.FINALIZADO)
        assert not MAQUINA_TRIMESTRE.es_valida(EstadoTrimestre.FINALIZADO, EstadoTrimestre.ACTIVO)

    def test_tabla_con_estado_desconocido(self):
        with pytest.raises(ValueError):
            MaquinaEstados('prueba', ['A', 'B'], {('A', 'C')})
