from decimal import Decimal

import pytest

from academico.exceptions import PrecondicionError, SupletorioNoHabilitadoError, TransicionInvalidaError
from academico.models import EstadoPromedioAnual, EstadoSupletorio, PeriodoLectivo, RolCalificacion
from academico.services import ServiciosCalificacion, ServiciosPeriodo, ServiciosSupletorio
from academico.tests import fabricas


@pytest.mark.django_db
class TestEstadosSupletorio:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.periodo = fabricas.crear_periodo()
        self.docente = fabricas.crear_docente('0901', 'Ana', 'Andrade')
        self.curso = fabricas.crear_curso(self.periodo)
        self.matematica = fabricas.crear_materia_curso(self.curso, 'MAT', 'Matemática', self.docente)
        self.vera = fabricas.crear_estudiante('1301', 'Ana', 'Vera', self.curso)
        self.mora = fabricas.crear_estudiante('1302', 'Luis', 'Mora', self.curso)
        fabricas.cerrar_trimestres(
            self.periodo, nota=8, notas={(self.mora.pk, self.matematica.pk): Decimal('5.00')}
        )

    def cambiar(self, estado):
        return ServiciosSupletorio.cambiar_estado_supletorio(self.periodo, estado)

    def estado_actual(self):
        return PeriodoLectivo.objects.get(pk=self.periodo.pk).estado_supletorio

    def promedio_mora(self):
        return self.mora.promedios_periodo.get(materia_curso=self.matematica)

    def test_no_se_cierra_desde_pendiente(self):
        with pytest.raises(TransicionInvalidaError) as excinfo:
            self.cambiar(EstadoSupletorio.CERRADO)

        assert excinfo.value.mensaje == 'No se pueden cerrar supletorios que aún están pendientes.'
        assert self.estado_actual() == EstadoSupletorio.PENDIENTE

    def test_no_se_regresa_de_cerrado_a_pendiente(self):
        self.cambiar(EstadoSupletorio.ACTIVADO)
        self.cambiar(EstadoSupletorio.CERRADO)

        with pytest.raises(TransicionInvalidaError):
            self.cambiar(EstadoSupletorio.PENDIENTE)

        assert self.estado_actual() == EstadoSupletorio.CERRADO

    def test_mismo_estado_no_es_transicion(self):
        self.cambiar(EstadoSupletorio.ACTIVADO)

        with pytest.raises(TransicionInvalidaError):
            self.cambiar(EstadoSupletorio.ACTIVADO)

    def test_estado_desconocido(self):
        resultado = ServiciosSupletorio.transicionar_supletorio(self.periodo, 'ABIERTO')

        assert resultado['ok'] is False
        assert resultado['codigo'] == 'TRANSICION_INVALIDA'

    def test_activar_marca_estudiantes_en_supletorio(self):
        estadisticas = self.cambiar(EstadoSupletorio.ACTIVADO)

        assert estadisticas['estado_anterior'] == 'PENDIENTE'
        assert estadisticas['total_promedios_anuales'] == 2
        assert estadisticas['estudiantes_en_supletorio'] == 1
        assert estadisticas['estudiantes_aprobados'] == 1
        promedio = self.promedio_mora()
        assert promedio.en_supletorio
        assert promedio.promedio_anual == Decimal('5.00')
        assert promedio.estado == EstadoPromedioAnual.SUPLETORIO

    def test_transiciones_permitidas(self):
        for estado in (
            EstadoSupletorio.ACTIVADO,
            EstadoSupletorio.CERRADO,
            EstadoSupletorio.ACTIVADO,
            EstadoSupletorio.PENDIENTE,
        ):
            resultado = ServiciosSupletorio.transicionar_supletorio(self.periodo, estado)
            assert resultado['ok'], resultado
            assert self.estado_actual() == estado

    def test_cerrar_devuelve_resumen(self):
        self.cambiar(EstadoSupletorio.ACTIVADO)
        ServiciosCalificacion.registrar_nota_supletorio(
            self.promedio_mora(), '9.00', RolCalificacion.DOCENTE, self.docente
        )

        estadisticas = self.cambiar(EstadoSupletorio.CERRADO)

        assert estadisticas['total_estudiantes_en_supletorio'] == 1
        assert estadisticas['estudiantes_que_rindieron'] == 1
        assert estadisticas['estudiantes_que_aprobaron'] == 1

    def test_nota_de_supletorio_se_conserva(self):
        self.cambiar(EstadoSupletorio.ACTIVADO)
        ServiciosCalificacion.registrar_nota_supletorio(
            self.promedio_mora(), '10', RolCalificacion.ADMINISTRADOR
        )

        self.cambiar(EstadoSupletorio.PENDIENTE)
        self.cambiar(EstadoSupletorio.ACTIVADO)
        self.cambiar(EstadoSupletorio.CERRADO)
        self.cambiar(EstadoSupletorio.ACTIVADO)

        promedio = self.promedio_mora()
        assert promedio.nota_supletorio == Decimal('10.00')
        assert promedio.promedio_final == Decimal('7.00')
        assert promedio.estado == EstadoPromedioAnual.APROBADO
        assert promedio.nota_efectiva == Decimal('7.00')

    def test_supletorio_reprobado(self):
        self.cambiar(EstadoSupletorio.ACTIVADO)

        promedio = ServiciosCalificacion.registrar_nota_supletorio(
            self.promedio_mora(), '6', RolCalificacion.ADMINISTRADOR
        )

        assert promedio.promedio_final == Decimal('5.50')
        assert promedio.estado == EstadoPromedioAnual.REPROBADO

    def test_nota_solo_con_supletorios_activados(self):
        with pytest.raises(SupletorioNoHabilitadoError):
            ServiciosCalificacion.registrar_nota_supletorio(
                self.promedio_mora(), '9', RolCalificacion.ADMINISTRADOR
            )

    def test_nota_solo_para_estudiantes_en_supletorio(self):
        self.cambiar(EstadoSupletorio.ACTIVADO)
        promedio_vera = self.vera.promedios_periodo.get(materia_curso=self.matematica)

        with pytest.raises(SupletorioNoHabilitadoError):
            ServiciosCalificacion.registrar_nota_supletorio(promedio_vera, '9', RolCalificacion.ADMINISTRADOR)

    def test_periodo_finalizado_no_admite_cambios(self):
        self.cambiar(EstadoSupletorio.ACTIVADO)
        self.cambiar(EstadoSupletorio.CERRADO)
        ServiciosPeriodo.finalizar_periodo(self.periodo)

        with pytest.raises(PrecondicionError):
            self.cambiar(EstadoSupletorio.ACTIVADO)

        assert self.estado_actual() == EstadoSupletorio.CERRADO
