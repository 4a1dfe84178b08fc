from django.urls import path

from folio.blog import views

app_name = "blog_admin"

urlpatterns = [
    path("", views.BlogPostAdminList.as_view(), name="list"),
    path("new/", views.BlogPostAdminForm.as_view(), name="create"),
    path("edit/<str:pk>/", views.BlogPostAdminForm.as_view(), name="update"),
    path("delete/<str:pk>/", views.BlogPostAdminDelete.as_view(), name="delete"),
]
