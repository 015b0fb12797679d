import pytest
from django.contrib.admin.models import CHANGE, LogEntry

from academico.models import EstadoTrimestre
from academico.services import ServiciosMatricula, ServiciosTrimestre
from academico.tests import fabricas
from institucional.auditoria import set_current_user
from institucional.models import AuditoriaDatos, TipoAccionDatos, Usuario


@pytest.mark.django_db
class TestAuditoria:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.admin = Usuario.objects.create_superuser('admin@colegio.edu.ec', 'admin123')
        self.periodo = fabricas.crear_periodo()
        self.curso = fabricas.crear_curso(self.periodo)
        self.vera = fabricas.crear_estudiante('1301', 'Ana', 'Vera', self.curso)
        yield
        set_current_user(None)

    def test_creacion_queda_registrada(self):
        registro = AuditoriaDatos.objects.filter(modelo='academico.periodolectivo').get()

        assert registro.tipo_accion == TipoAccionDatos.CREAR
        assert registro.valores_nuevos['estado'] == 'ACTIVO'
        assert registro.cambios_resumidos == 'Registro creado'

    def test_cambio_de_estado_con_usuario(self):
        set_current_user(self.admin)

        ServiciosMatricula.retirar_matricula(self.vera.matriculas.get(), 'Cambio de ciudad')

        registro = AuditoriaDatos.objects.filter(
            modelo='academico.matricula', tipo_accion=TipoAccionDatos.MODIFICAR
        ).get()
        assert registro.usuario == self.admin
        assert registro.valores_anteriores['estado'] == 'ACTIVO'
        assert registro.valores_nuevos['estado'] == 'RETIRADO'
        assert "estado: 'ACTIVO' → 'RETIRADO'" in registro.cambios_resumidos

    def test_guardar_sin_cambios_no_registra(self):
        matricula = self.vera.matriculas.get()
        antes = AuditoriaDatos.objects.count()

        matricula.save()

        assert AuditoriaDatos.objects.count() == antes

    def test_acciones_de_servicio_en_historial_del_admin(self):
        trimestre = self.periodo.trimestres.get(numero=1)

        ServiciosTrimestre.activar_trimestre(trimestre, self.admin)

        entrada = LogEntry.objects.get(user=self.admin)
        assert entrada.action_flag == CHANGE
        assert entrada.object_id == str(trimestre.pk)
        assert entrada.change_message == 'Trimestre activado'
        trimestre.refresh_from_db()
        assert trimestre.estado == EstadoTrimestre.ACTIVO
