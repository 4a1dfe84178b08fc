from django.urls import path

from folio.showcase import views

app_name = "showcase"

urlpatterns = [
    path("", views.AppShowcase.as_view(), name="list"),
    path("<slug:slug>/", views.AppDetail.as_view(), name="detail"),
]
