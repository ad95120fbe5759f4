# users/forms.py
from django import forms
from django.contrib.auth.forms import AuthenticationForm, PasswordChangeForm

from core.forms import INPUT_CLASS


class CustomLoginForm(AuthenticationForm):
    """Login form with styled inputs"""
    username = forms.CharField(
        widget=forms.TextInput(attrs={
            'class': INPUT_CLASS,
            'placeholder': 'Username',
            'autofocus': True,
        })
    )
    password = forms.CharField(
        strip=False,
        widget=forms.PasswordInput(attrs={
            'class': INPUT_CLASS,
            'placeholder': 'Password',
        })
    )


class StyledPasswordChangeForm(PasswordChangeForm):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.widget.attrs['class'] = INPUT_CLASS
