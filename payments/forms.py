from django import forms

from .services import PAYMENT_OPTIONS


class PaymentMethodAddForm(forms.Form):
    payment_option = forms.ChoiceField(choices=PAYMENT_OPTIONS, widget=forms.RadioSelect)
