from django.apps import AppConfig


class DenseVectorConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "django_dense_vector"
    label = "django_dense_vector"
    verbose_name = "Django Dense Vector"
