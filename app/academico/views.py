"""
Endpoints JSON del ciclo de vida académico.

La interfaz (tablas, diálogos de cierre) consume estas vistas; todas requieren un
usuario del grupo Administrador y devuelven ``{'ok': False, ...}`` con el detalle
de cada problema cuando una regla de negocio impide la operación.
"""
import json
import logging

from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View

from .exceptions import AcademicoException, PrecondicionError, TransicionInvalidaError
from .models import Estudiante, MateriaCurso, Matricula, PeriodoLectivo, Trimestre
from .services import (
    ServiciosElegibilidad,
    ServiciosMatricula,
    ServiciosPeriodo,
    ServiciosPromedios,
    ServiciosSupletorio,
    ServiciosTrimestre,
)

logger = logging.getLogger(__name__)

GRUPO_ADMINISTRADOR = 'Administrador'


class AdministradorRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    raise_exception = True

    def test_func(self):
        user = self.request.user
        if not user.habilitado:
            return False
        return user.is_superuser or user.groups.filter(name=GRUPO_ADMINISTRADOR).exists()

    def handle_no_permission(self):
        return JsonResponse(
            {'ok': False, 'reason': 'No tiene permisos para acceder a esta sección.'},
            status=403 if self.request.user.is_authenticated else 401
        )


class AcademicoJsonView(AdministradorRequiredMixin, View):
    """Convierte las excepciones del dominio en respuestas JSON."""

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except AcademicoException as e:
            logger.info("Operación rechazada en %s: %s", request.path, e.mensaje)
            status = 409 if isinstance(e, (TransicionInvalidaError, PrecondicionError)) else 400
            return JsonResponse(e.como_dict(), status=status)

    @staticmethod
    def obtener_datos(request):
        if request.content_type == 'application/json':
            try:
                datos = json.loads(request.body or b'{}')
            except ValueError:
                return {}
            return datos if isinstance(datos, dict) else {}
        return request.POST


class ValidarCierrePeriodoView(AcademicoJsonView):
    def get(self, request, periodo_id):
        periodo = get_object_or_404(PeriodoLectivo, pk=periodo_id)
        return JsonResponse(ServiciosPeriodo.validar_cierre_periodo(periodo))


class FinalizarPeriodoView(AcademicoJsonView):
    def post(self, request, periodo_id):
        periodo = get_object_or_404(PeriodoLectivo, pk=periodo_id)
        politica = self.obtener_datos(request).get('politica_sin_matricula') or None
        resultado = ServiciosPeriodo.finalizar_periodo(periodo, request.user, politica)
        return JsonResponse(resultado)


class SupletoriosView(AcademicoJsonView):
    def post(self, request, periodo_id):
        periodo = get_object_or_404(PeriodoLectivo, pk=periodo_id)
        estado = self.obtener_datos(request).get('estado', '')
        resultado = ServiciosSupletorio.transicionar_supletorio(periodo, estado, request.user)
        if not resultado['ok']:
            return JsonResponse(resultado, status=409)
        return JsonResponse(resultado)


class ElegibilidadView(AcademicoJsonView):
    def get(self, request, periodo_id, estudiante_id):
        periodo = get_object_or_404(PeriodoLectivo, pk=periodo_id)
        estudiante = get_object_or_404(Estudiante, pk=estudiante_id)
        return JsonResponse(ServiciosElegibilidad.evaluar_elegibilidad(estudiante, periodo))


class ValidarCierreTrimestreView(AcademicoJsonView):
    def get(self, request, trimestre_id):
        trimestre = get_object_or_404(Trimestre, pk=trimestre_id)
        return JsonResponse(ServiciosTrimestre.validar_cierre_trimestre(trimestre).como_dict())


class ActivarTrimestreView(AcademicoJsonView):
    def post(self, request, trimestre_id):
        trimestre = get_object_or_404(Trimestre, pk=trimestre_id)
        trimestre = ServiciosTrimestre.activar_trimestre(trimestre, request.user)
        return JsonResponse({'ok': True, 'trimestre_id': trimestre.pk, 'estado': trimestre.estado})


class FinalizarTrimestreView(AcademicoJsonView):
    def post(self, request, trimestre_id):
        trimestre = get_object_or_404(Trimestre, pk=trimestre_id)
        return JsonResponse(ServiciosTrimestre.finalizar_trimestre(trimestre, request.user))


class TablaPromediosView(AcademicoJsonView):
    def get(self, request, trimestre_id, materia_curso_id):
        trimestre = get_object_or_404(Trimestre, pk=trimestre_id)
        materia_curso = get_object_or_404(MateriaCurso, pk=materia_curso_id, periodo=trimestre.periodo)
        return JsonResponse(ServiciosPromedios.tabla_promedios(materia_curso, trimestre))


class PromedioTrimestreView(AcademicoJsonView):
    def get(self, request, trimestre_id, materia_curso_id, estudiante_id):
        trimestre = get_object_or_404(Trimestre, pk=trimestre_id)
        materia_curso = get_object_or_404(MateriaCurso, pk=materia_curso_id, periodo=trimestre.periodo)
        estudiante = get_object_or_404(Estudiante, pk=estudiante_id)
        resultado = ServiciosPromedios.calcular_promedio_trimestre(estudiante, materia_curso, trimestre)
        return JsonResponse({'ok': True, **resultado.como_dict()})


class RetirarMatriculaView(AcademicoJsonView):
    def post(self, request, matricula_id):
        matricula = get_object_or_404(Matricula, pk=matricula_id)
        motivo = self.obtener_datos(request).get('motivo', '')
        matricula = ServiciosMatricula.retirar_matricula(matricula, motivo, request.user)
        return JsonResponse({'ok': True, 'matricula_id': matricula.pk, 'estado': matricula.estado})
