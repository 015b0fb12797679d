from django.contrib import admin
from django.urls import include, path

admin.site.site_title = "Sitio de administración - Gestión académica"
admin.site.site_header = "Administración del período lectivo"
admin.site.index_title = "Sitio de administración"

urlpatterns = [
    path("admin/", admin.site.urls),
    path('academico/', include('academico.urls')),
]
