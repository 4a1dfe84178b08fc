from crispy_forms.layout import Field
from crispy_forms.layout import Layout
from django import forms
from django.utils.translation import gettext_lazy as _

from folio.content.forms import ContentForm
from folio.content.forms import DelimitedField
from folio.content.forms import ImageUploadField


class BlogPostForm(ContentForm):
    title = forms.CharField(
        label=_("Title"),
        max_length=250,
        widget=forms.TextInput(attrs={"class": "form-control", "autocomplete": "off"}),
    )
    excerpt = forms.CharField(
        label=_("Excerpt"),
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 2}),
        error_messages={"required": _("Add a short excerpt for the blog list.")},
    )
    content = forms.CharField(
        label=_("Content"),
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 14}),
        error_messages={"required": _("A post needs some content.")},
    )
    tags = DelimitedField(label=_("Tags"))
    published = forms.BooleanField(label=_("Published"), required=False)
    featured_image = ImageUploadField(label=_("Featured image"))

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.helper.layout = Layout(
            Field("title", wrapper_class="mb-3"),
            Field("excerpt", wrapper_class="mb-3"),
            Field("content", wrapper_class="mb-3"),
            Field("tags", wrapper_class="mb-3"),
            Field("featured_image", wrapper_class="mb-3"),
            Field("published", wrapper_class="mb-3"),
        )
