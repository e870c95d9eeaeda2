from django.urls import path
from . import views

urlpatterns = [
    # Structural checks
    path('api/validate/', views.validate_automaton, name='validate'),
    path('api/check-properties/', views.check_properties, name='check_properties'),

    # Stepwise and whole-run simulation
    path('api/reset/', views.reset_simulation, name='reset'),
    path('api/step/', views.step_simulation, name='step'),
    path('api/run/', views.run_simulation, name='run'),
    path('api/batch-test/', views.batch_test, name='batch_test'),

    # Practice problems
    path('api/problems/<str:kind>/', views.problems, name='problems'),
    path('api/problems/<str:kind>/<str:problem_id>/check/', views.check_problem, name='check_problem'),
]
