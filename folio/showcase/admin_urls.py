from django.urls import path

from folio.showcase import views

app_name = "showcase_admin"

urlpatterns = [
    path("", views.AppListingAdminList.as_view(), name="list"),
    path("new/", views.AppListingAdminForm.as_view(), name="create"),
    path("edit/<str:pk>/", views.AppListingAdminForm.as_view(), name="update"),
    path("delete/<str:pk>/", views.AppListingAdminDelete.as_view(), name="delete"),
]
