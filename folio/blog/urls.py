from django.urls import path

from folio.blog import views

app_name = "blog"

urlpatterns = [
    path("", views.BlogPostList.as_view(), name="list"),
    path("<slug:slug>/", views.BlogPostDetail.as_view(), name="detail"),
]
