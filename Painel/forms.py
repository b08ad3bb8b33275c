from django import forms


class LoginForm(forms.Form):
    email = forms.EmailField(label="E-mail")
    password = forms.CharField(label="Senha", widget=forms.PasswordInput)


class ProductForm(forms.Form):
    nome = forms.CharField(max_length=120)
    descricao = forms.CharField(required=False, widget=forms.Textarea)
    preco = forms.DecimalField(min_value=0, max_digits=10, decimal_places=2)
    codigo_categoria = forms.CharField(required=False)
    disponivel = forms.BooleanField(required=False, initial=True)
    codigo_estabelecimento = forms.CharField(
        required=False, help_text="Apenas administradores escolhem o estabelecimento."
    )


class CategoryForm(forms.Form):
    nome = forms.CharField(max_length=80)
    codigo_estabelecimento = forms.CharField(required=False)


class ClientForm(forms.Form):
    nome = forms.CharField(max_length=80)
    sobrenome = forms.CharField(max_length=80, required=False)
    whatsapp = forms.CharField(max_length=20)
    email = forms.EmailField(required=False)
    endereco = forms.CharField(max_length=200, required=False)
    bairro = forms.CharField(max_length=80, required=False)
    cidade = forms.CharField(max_length=80, required=False)
    codigo_estabelecimento = forms.CharField(required=False)


class CourierForm(forms.Form):
    nome = forms.CharField(max_length=80)
    telefone = forms.CharField(max_length=20)
    codigo_estabelecimento = forms.CharField(required=False)


class CompanyForm(forms.Form):
    razao_social = forms.CharField(max_length=150)
    nome_fantasia = forms.CharField(max_length=150, required=False)
    cnpj = forms.CharField(max_length=18)
    email = forms.EmailField(required=False)
    telefone = forms.CharField(max_length=20, required=False)


class OrderForm(forms.Form):
    cliente_nome = forms.CharField(label="Nome do cliente", max_length=80)
    cliente_sobrenome = forms.CharField(label="Sobrenome", max_length=80, required=False)
    cliente_whatsapp = forms.CharField(label="WhatsApp", max_length=20, required=False)
    forma_pagamento = forms.ChoiceField(label="Forma de pagamento", choices=())
    forma_entrega = forms.ChoiceField(label="Forma de entrega", choices=())
    valor_entrega = forms.DecimalField(
        label="Taxa de entrega", min_value=0, max_digits=8, decimal_places=2, required=False
    )
    observacao = forms.CharField(label="Observação", required=False, widget=forms.Textarea)

    def __init__(self, *args, payment_methods=(), delivery_methods=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["forma_pagamento"].choices = [(m, m) for m in payment_methods]
        self.fields["forma_entrega"].choices = [(m, m) for m in delivery_methods]


class EstablishmentForm(forms.Form):
    nome = forms.CharField(max_length=150)
    cnpj = forms.CharField(max_length=18, required=False)
    telefone = forms.CharField(max_length=20, required=False)
    email = forms.EmailField(required=False)
    endereco = forms.CharField(max_length=200, required=False)
    numero = forms.CharField(max_length=10, required=False)
    bairro = forms.CharField(max_length=80, required=False)
    cep = forms.CharField(max_length=9, required=False)
    cidade = forms.CharField(max_length=80, required=False)
    uf = forms.CharField(max_length=2, required=False)


class UserForm(forms.Form):
    nome = forms.CharField(max_length=120)
    email = forms.EmailField(label="E-mail")
    senha = forms.CharField(widget=forms.PasswordInput, min_length=6)
    role_name = forms.ChoiceField(
        label="Tipo de usuário",
        choices=(
            ("admin_geral", "Administrador"),
            ("estabelecimento", "Estabelecimento"),
            ("atendente", "Atendente"),
        ),
    )
    estabelecimento_id = forms.CharField(label="Estabelecimento", required=False)


class UserTypeForm(forms.Form):
    role_name = forms.SlugField(label="Nome interno", max_length=50)
    role_display_name = forms.CharField(label="Nome de exibição", max_length=80)
    description = forms.CharField(label="Descrição", required=False, widget=forms.Textarea)


class InviteForm(forms.Form):
    nome = forms.CharField(label="Nome do atendente", max_length=120)
    email = forms.EmailField(label="E-mail")
    telefone = forms.CharField(max_length=20, required=False)


class ActivateInviteForm(forms.Form):
    senha = forms.CharField(widget=forms.PasswordInput, min_length=6)
    confirmar_senha = forms.CharField(label="Confirmar senha", widget=forms.PasswordInput)

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get("senha") != cleaned_data.get("confirmar_senha"):
            raise forms.ValidationError("As senhas não coincidem.")
        return cleaned_data
