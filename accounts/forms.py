from django import forms
from django.conf import settings

REQUIRED_MESSAGE = 'Username and password are required'


class AdminLoginForm(forms.Form):
    username = forms.CharField(max_length=100, required=False)
    password = forms.CharField(required=False, strip=False)

    def has_credentials(self):
        return self.is_valid() and bool(self.cleaned_data['username'] and self.cleaned_data['password'])


class AdminSetupForm(forms.Form):
    username = forms.CharField(max_length=100, required=False)
    password = forms.CharField(required=False, strip=False)
    email = forms.CharField(max_length=255, required=False)

    def clean(self):
        cleaned_data = super().clean()
        username = cleaned_data.get('username')
        password = cleaned_data.get('password')

        if not username or not password:
            raise forms.ValidationError(REQUIRED_MESSAGE)

        min_length = settings.ADMIN_PASSWORD_MIN_LENGTH
        if len(password) < min_length:
            raise forms.ValidationError(f'Password must be at least {min_length} characters')

        return cleaned_data

    def first_error(self):
        for errors in self.errors.values():
            if errors:
                return errors[0]
        return REQUIRED_MESSAGE
