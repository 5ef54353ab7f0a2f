from django import forms

from .models import CATEGORIES


class ProductForm(forms.Form):
    name = forms.CharField(max_length=200)
    description = forms.CharField(required=False)
    price = forms.DecimalField(max_digits=8, decimal_places=2, min_value=0)
    image = forms.URLField(max_length=500, required=False)
    category = forms.ChoiceField(choices=CATEGORIES)
    stock = forms.IntegerField(min_value=0)


class CheckoutForm(forms.Form):
    customer_name = forms.CharField(max_length=100)
    contact_number = forms.CharField(max_length=30)
    delivery_address = forms.CharField()
    notes = forms.CharField(required=False)


class OrderLineForm(forms.Form):
    product_id = forms.CharField(max_length=64)
    quantity = forms.IntegerField(min_value=1)


class CartLineForm(forms.Form):
    product_id = forms.CharField(max_length=64)
    quantity = forms.IntegerField(min_value=1, required=False)


class CartQuantityForm(forms.Form):
    quantity = forms.IntegerField(min_value=0)


class RegisterForm(forms.Form):
    email = forms.EmailField(max_length=150)
    password = forms.CharField(min_length=6, error_messages={
        'min_length': 'Password must be at least 6 characters long',
    })


class LoginForm(forms.Form):
    email = forms.EmailField(max_length=150)
    password = forms.CharField()


class StatusForm(forms.Form):
    status = forms.CharField(max_length=40)
