from crispy_forms.helper import FormHelper
from crispy_forms.layout import Field
from crispy_forms.layout import Layout
from django import forms
from django.utils.translation import gettext_lazy as _


class SignInForm(forms.Form):
    email = forms.EmailField(
        label=_("Email"),
        widget=forms.EmailInput(
            attrs={
                "class": "form-control",
                "autocomplete": "email",
                "autofocus": True,
            },
        ),
    )
    password = forms.CharField(
        label=_("Password"),
        strip=False,
        widget=forms.PasswordInput(
            attrs={
                "class": "form-control",
                "autocomplete": "current-password",
            },
        ),
    )

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.helper = FormHelper(self)
        self.helper.form_tag = False  # handled in template
        self.helper.label_class = "form-label fw-semibold"
        self.helper.disable_csrf = True
        self.helper.layout = Layout(
            Field("email", wrapper_class="mb-3"),
            Field("password", wrapper_class="mb-3"),
        )

    def clean_email(self) -> str:
        return (self.cleaned_data.get("email") or "").strip().lower()
