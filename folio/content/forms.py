from crispy_forms.helper import FormHelper
from django import forms
from django.utils.translation import gettext_lazy as _

from folio.content.media import validate_image_upload


class ImageUploadField(forms.FileField):
    """Optional image upload checked by extension, size and file header."""

    default_validators = [validate_image_upload]

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault(
            "widget",
            forms.FileInput(attrs={"class": "form-control", "accept": "image/*"}),
        )
        super().__init__(*args, **kwargs)


class DelimitedField(forms.CharField):
    """Comma-separated list entered as free text."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault(
            "help_text",
            _("Separate entries with commas."),
        )
        kwargs.setdefault(
            "widget",
            forms.TextInput(attrs={"class": "form-control", "autocomplete": "off"}),
        )
        super().__init__(*args, **kwargs)


class ContentForm(forms.Form):
    """
    Base for the admin content forms.

    ``media_previews`` maps a media field name to the public URL currently
    stored for it, so templates can show what a new upload would replace.
    """

    def __init__(self, *args, media_previews=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.media_previews = media_previews or {}
        self.helper = FormHelper(self)
        self.helper.form_tag = False  # handled in template
        self.helper.label_class = "form-label fw-semibold"
        self.helper.disable_csrf = True

    def clean_title(self) -> str:
        title = (self.cleaned_data.get("title") or "").strip()
        if not title:
            raise forms.ValidationError(_("Title is required."))
        return title
