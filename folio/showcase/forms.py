from crispy_forms.layout import Field
from crispy_forms.layout import Layout
from django import forms
from django.utils.translation import gettext_lazy as _

from folio.content.forms import ContentForm
from folio.content.forms import DelimitedField
from folio.content.forms import ImageUploadField
from folio.showcase.constants import AppStatus


class AppListingForm(ContentForm):
    title = forms.CharField(
        label=_("Title"),
        max_length=250,
        widget=forms.TextInput(attrs={"class": "form-control", "autocomplete": "off"}),
    )
    description = forms.CharField(
        label=_("Description"),
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 5}),
        error_messages={"required": _("Describe what the app does.")},
    )
    status = forms.ChoiceField(
        label=_("Status"),
        choices=AppStatus.choices,
        initial=AppStatus.IN_DEVELOPMENT,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    app_store_link = forms.URLField(
        label=_("App Store link"),
        required=False,
        assume_scheme="https",
        help_text=_("Only saved for released apps."),
        widget=forms.URLInput(attrs={"class": "form-control"}),
    )
    expected_release = forms.CharField(
        label=_("Expected release"),
        required=False,
        max_length=100,
        help_text=_("For example “Spring 2025”. Ignored once released."),
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    features = DelimitedField(label=_("Features"))
    technologies = DelimitedField(label=_("Technologies"))
    is_featured = forms.BooleanField(label=_("Featured"), required=False)
    image = ImageUploadField(label=_("Screenshot"))
    icon = ImageUploadField(label=_("Icon"))

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.helper.layout = Layout(
            Field("title", wrapper_class="mb-3"),
            Field("description", wrapper_class="mb-3"),
            Field("status", wrapper_class="mb-3"),
            Field("app_store_link", wrapper_class="mb-3"),
            Field("expected_release", wrapper_class="mb-3"),
            Field("features", wrapper_class="mb-3"),
            Field("technologies", wrapper_class="mb-3"),
            Field("image", wrapper_class="mb-3"),
            Field("icon", wrapper_class="mb-3"),
            Field("is_featured", wrapper_class="mb-3"),
        )
