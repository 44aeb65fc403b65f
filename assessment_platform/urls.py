from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # --- Authentication ---
    path('api/auth/', include('users.urls')),

    # --- Exam Taking ---
    path('api/', include('assessments.urls')),

    # --- Test Catalogue ---
    path('api/', include('exams.urls')),
]
