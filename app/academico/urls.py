from django.urls import path
from . import views

urlpatterns = [
    path('periodos/<int:periodo_id>/cierre/', views.ValidarCierrePeriodoView.as_view(), name='validar_cierre_periodo'),
    path('periodos/<int:periodo_id>/finalizar/', views.FinalizarPeriodoView.as_view(), name='finalizar_periodo'),
    path('periodos/<int:periodo_id>/supletorios/', views.SupletoriosView.as_view(), name='supletorios_periodo'),
    path('periodos/<int:periodo_id>/estudiantes/<int:estudiante_id>/elegibilidad/', views.ElegibilidadView.as_view(), name='elegibilidad_estudiante'),
    path('trimestres/<int:trimestre_id>/cierre/', views.ValidarCierreTrimestreView.as_view(), name='validar_cierre_trimestre'),
    path('trimestres/<int:trimestre_id>/activar/', views.ActivarTrimestreView.as_view(), name='activar_trimestre'),
    path('trimestres/<int:trimestre_id>/finalizar/', views.FinalizarTrimestreView.as_view(), name='finalizar_trimestre'),
    path('trimestres/<int:trimestre_id>/materias/<int:materia_curso_id>/promedios/', views.TablaPromediosView.as_view(), name='tabla_promedios'),
    path('trimestres/<int:trimestre_id>/materias/<int:materia_curso_id>/estudiantes/<int:estudiante_id>/promedio/', views.PromedioTrimestreView.as_view(), name='promedio_trimestre'),
    path('matriculas/<int:matricula_id>/retirar/', views.RetirarMatriculaView.as_view(), name='retirar_matricula'),
]
