import pytest
from django.contrib.auth.models import Group
from django.test import Client
from django.urls import reverse

from academico.models import EstadoMatricula, EstadoPeriodo, EstadoSupletorio, EstadoTrimestre
from academico.tests import fabricas
from institucional.models import Usuario


@pytest.mark.django_db
class TestVistasAcademicas:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.client = Client()
        self.admin = Usuario.objects.create_user('admin@colegio.edu.ec', 'admin123')
        self.admin.groups.add(Group.objects.create(name='Administrador'))
        self.docente = Usuario.objects.create_user('docente@colegio.edu.ec', 'docente123')

        self.periodo = fabricas.crear_periodo()
        self.curso = fabricas.crear_curso(self.periodo)
        self.matematica = fabricas.crear_materia_curso(self.curso, 'MAT', 'Matemática')
        self.vera = fabricas.crear_estudiante('1301', 'Ana', 'Vera', self.curso)
        self.trimestre = self.periodo.trimestres.get(numero=1)

    def test_requiere_autenticacion(self):
        response = self.client.get(reverse('validar_cierre_periodo', args=[self.periodo.pk]))

        assert response.status_code == 401
        assert response.json()['ok'] is False

    def test_requiere_grupo_administrador(self):
        self.client.force_login(self.docente)

        response = self.client.get(reverse('validar_cierre_periodo', args=[self.periodo.pk]))

        assert response.status_code == 403

    def test_administrador_deshabilitado(self):
        self.admin.habilitado = False
        self.admin.save()
        self.client.force_login(self.admin)

        response = self.client.get(reverse('validar_cierre_periodo', args=[self.periodo.pk]))

        assert response.status_code == 403
        assert response.json()['ok'] is False

    def test_validar_cierre_periodo(self):
        self.client.force_login(self.admin)

        response = self.client.get(reverse('validar_cierre_periodo', args=[self.periodo.pk]))

        assert response.status_code == 200
        datos = response.json()
        assert datos['puede_cerrar'] is False
        assert len(datos['errores']) == 3

    def test_finalizar_periodo_con_trimestres_abiertos(self):
        self.client.force_login(self.admin)

        response = self.client.post(reverse('finalizar_periodo', args=[self.periodo.pk]))

        assert response.status_code == 409
        datos = response.json()
        assert datos['ok'] is False
        assert datos['codigo'] == 'PRECONDICION'
        assert len(datos['errores']) == 3
        assert datos['reason']
        self.periodo.refresh_from_db()
        assert self.periodo.estado == EstadoPeriodo.ACTIVO

    def test_finalizar_periodo(self):
        self.client.force_login(self.admin)
        fabricas.cerrar_trimestres(self.periodo)

        response = self.client.post(
            reverse('finalizar_periodo', args=[self.periodo.pk]),
            data={'politica_sin_matricula': 'CONSERVAR_ACTIVO'},
            content_type='application/json',
        )

        assert response.status_code == 200
        assert response.json()['estadisticas']['estudiantes_activos'] == 1

    def test_finalizar_periodo_con_politica_desconocida(self):
        self.client.force_login(self.admin)
        fabricas.cerrar_trimestres(self.periodo)

        response = self.client.post(
            reverse('finalizar_periodo', args=[self.periodo.pk]),
            data={'politica_sin_matricula': 'OTRA'},
            content_type='application/json',
        )

        assert response.status_code == 409
        datos = response.json()
        assert datos['codigo'] == 'PRECONDICION'
        assert datos['errores'][0]['politica'] == 'OTRA'
        self.periodo.refresh_from_db()
        assert self.periodo.estado == EstadoPeriodo.ACTIVO

    def test_cuerpo_json_que_no_es_objeto(self):
        self.client.force_login(self.admin)

        response = self.client.post(
            reverse('supletorios_periodo', args=[self.periodo.pk]),
            data=['ACTIVADO'],
            content_type='application/json',
        )

        assert response.status_code == 409
        assert response.json()['codigo'] == 'TRANSICION_INVALIDA'
        self.periodo.refresh_from_db()
        assert self.periodo.estado_supletorio == EstadoSupletorio.PENDIENTE

    def test_transicion_de_supletorio_invalida(self):
        self.client.force_login(self.admin)

        response = self.client.post(
            reverse('supletorios_periodo', args=[self.periodo.pk]), data={'estado': 'CERRADO'}
        )

        assert response.status_code == 409
        assert response.json()['codigo'] == 'TRANSICION_INVALIDA'

    def test_activar_supletorios(self):
        self.client.force_login(self.admin)

        response = self.client.post(
            reverse('supletorios_periodo', args=[self.periodo.pk]), data={'estado': 'ACTIVADO'}
        )

        assert response.status_code == 200
        assert response.json()['ok'] is True
        self.periodo.refresh_from_db()
        assert self.periodo.estado_supletorio == EstadoSupletorio.ACTIVADO

    def test_ciclo_de_trimestre(self):
        self.client.force_login(self.admin)

        response = self.client.post(reverse('activar_trimestre', args=[self.trimestre.pk]))
        assert response.status_code == 200
        assert response.json()['estado'] == EstadoTrimestre.ACTIVO

        response = self.client.get(reverse('validar_cierre_trimestre', args=[self.trimestre.pk]))
        datos = response.json()
        assert datos['ok'] is False
        assert datos['problemas_por_docente'][0]['docente_nombre'] == 'Sin docente asignado'

        response = self.client.post(reverse('finalizar_trimestre', args=[self.trimestre.pk]))
        assert response.status_code == 409

        fabricas.completar_trimestre(self.trimestre)
        response = self.client.post(reverse('finalizar_trimestre', args=[self.trimestre.pk]))
        assert response.status_code == 200
        assert response.json()['promedios_generados'] == 1

    def test_promedio_incompleto(self):
        self.client.force_login(self.admin)
        fabricas.calificar(self.vera, self.matematica, self.trimestre, examen=None)

        response = self.client.get(
            reverse('promedio_trimestre', args=[self.trimestre.pk, self.matematica.pk, self.vera.pk])
        )

        assert response.status_code == 400
        assert response.json()['errores'][0]['componentes_faltantes'] == ['EXAMEN']

    def test_tabla_de_promedios(self):
        self.client.force_login(self.admin)
        fabricas.calificar(self.vera, self.matematica, self.trimestre)

        response = self.client.get(reverse('tabla_promedios', args=[self.trimestre.pk, self.matematica.pk]))

        assert response.status_code == 200
        assert response.json()['promedios']['nota_final_trimestre'] == '6.90'

    def test_elegibilidad(self):
        self.client.force_login(self.admin)

        response = self.client.get(reverse('elegibilidad_estudiante', args=[self.periodo.pk, self.vera.pk]))

        assert response.status_code == 200
        assert response.json()['graduado'] is False

    def test_retirar_matricula(self):
        self.client.force_login(self.admin)
        matricula = self.vera.matriculas.get()

        response = self.client.post(reverse('retirar_matricula', args=[matricula.pk]), data={'motivo': ''})
        assert response.status_code == 409

        response = self.client.post(
            reverse('retirar_matricula', args=[matricula.pk]), data={'motivo': 'Cambio de ciudad'}
        )
        assert response.status_code == 200
        assert response.json()['estado'] == EstadoMatricula.RETIRADO
