"""
Localization helpers.

Message lookup for the four supported interface languages with English
as the fallback, plus currency and date formatting that follows the
budget's currency.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from budgetpulse.models.records import (
    CurrencyCode,
    ExpenseCategory,
    IncomeCategory,
    RecurrenceType,
    quantize_amount,
)


SUPPORTED_LANGUAGES = ("en", "fr", "es", "pt")
DEFAULT_LANGUAGE = "en"


MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "category_food": "Food",
        "category_transportation": "Transportation",
        "category_entertainment": "Entertainment",
        "category_shopping": "Shopping",
        "category_utilities": "Utilities",
        "category_healthcare": "Healthcare",
        "category_education": "Education",
        "category_travel": "Travel",
        "category_other": "Other",
        "income_salary": "Salary",
        "income_freelance": "Freelance",
        "income_investment": "Investment",
        "income_gift": "Gift",
        "income_refund": "Refund",
        "income_other": "Other",
        "recurrence_weekly": "Weekly",
        "recurrence_biweekly": "Every 2 weeks",
        "recurrence_monthly": "Monthly",
        "recurrence_yearly": "Yearly",
        "this_month": "This month",
        "last_month": "Last month",
        "last_3_months": "Last 3 months",
        "last_6_months": "Last 6 months",
        "this_year": "This year",
        "custom_range": "Custom range",
        "rollover_positive": "Unused budget carried over",
        "rollover_negative": "Overspending carried over",
        "rollover_none": "No rollover",
        "subscription_payment": "Subscription payment",
        "budget_alert_title": "Budget alert",
        "budget_alert_body": "You've used {percent}% of your budget. {remaining} left.",
        "budget_exceeded_body": "You've gone over your monthly budget.",
        "persistence_unavailable": "Your data could not be saved. Please try again.",
        "premium_required": "This feature is part of BudgetPulse Premium.",
    },
    "fr": {
        "category_food": "Alimentation",
        "category_transportation": "Transport",
        "category_entertainment": "Loisirs",
        "category_shopping": "Achats",
        "category_utilities": "Factures",
        "category_healthcare": "Santé",
        "category_education": "Éducation",
        "category_travel": "Voyages",
        "category_other": "Autre",
        "income_salary": "Salaire",
        "income_freelance": "Freelance",
        "income_investment": "Investissement",
        "income_gift": "Cadeau",
        "income_refund": "Remboursement",
        "income_other": "Autre",
        "recurrence_weekly": "Hebdomadaire",
        "recurrence_biweekly": "Toutes les 2 semaines",
        "recurrence_monthly": "Mensuel",
        "recurrence_yearly": "Annuel",
        "this_month": "Ce mois-ci",
        "last_month": "Le mois dernier",
        "last_3_months": "3 derniers mois",
        "last_6_months": "6 derniers mois",
        "this_year": "Cette année",
        "custom_range": "Période personnalisée",
        "rollover_positive": "Budget non utilisé reporté",
        "rollover_negative": "Dépassement reporté",
        "rollover_none": "Aucun report",
        "subscription_payment": "Paiement d'abonnement",
        "budget_alert_title": "Alerte budget",
        "budget_alert_body": "Vous avez utilisé {percent} % de votre budget. Il reste {remaining}.",
        "budget_exceeded_body": "Vous avez dépassé votre budget mensuel.",
        "persistence_unavailable": "Vos données n'ont pas pu être enregistrées. Réessayez.",
        "premium_required": "Cette fonctionnalité fait partie de BudgetPulse Premium.",
    },
    "es": {
        "category_food": "Comida",
        "category_transportation": "Transporte",
        "category_entertainment": "Entretenimiento",
        "category_shopping": "Compras",
        "category_utilities": "Servicios",
        "category_healthcare": "Salud",
        "category_education": "Educación",
        "category_travel": "Viajes",
        "category_other": "Otro",
        "income_salary": "Salario",
        "income_freelance": "Freelance",
        "income_investment": "Inversión",
        "income_gift": "Regalo",
        "income_refund": "Reembolso",
        "income_other": "Otro",
        "recurrence_weekly": "Semanal",
        "recurrence_biweekly": "Cada 2 semanas",
        "recurrence_monthly": "Mensual",
        "recurrence_yearly": "Anual",
        "this_month": "Este mes",
        "last_month": "Mes pasado",
        "last_3_months": "Últimos 3 meses",
        "last_6_months": "Últimos 6 meses",
        "this_year": "Este año",
        "custom_range": "Rango personalizado",
        "rollover_positive": "Presupuesto no usado transferido",
        "rollover_negative": "Exceso de gasto transferido",
        "rollover_none": "Sin transferencia",
        "subscription_payment": "Pago de suscripción",
        "budget_alert_title": "Alerta de presupuesto",
        "budget_alert_body": "Has usado el {percent}% de tu presupuesto. Quedan {remaining}.",
        "budget_exceeded_body": "Has superado tu presupuesto mensual.",
        "persistence_unavailable": "No se pudieron guardar tus datos. Inténtalo de nuevo.",
        "premium_required": "Esta función es parte de BudgetPulse Premium.",
    },
    "pt": {
        "category_food": "Alimentação",
        "category_transportation": "Transporte",
        "category_entertainment": "Entretenimento",
        "category_shopping": "Compras",
        "category_utilities": "Contas",
        "category_healthcare": "Saúde",
        "category_education": "Educação",
        "category_travel": "Viagens",
        "category_other": "Outro",
        "income_salary": "Salário",
        "income_freelance": "Freelance",
        "income_investment": "Investimento",
        "income_gift": "Presente",
        "income_refund": "Reembolso",
        "income_other": "Outro",
        "recurrence_weekly": "Semanal",
        "recurrence_biweekly": "A cada 2 semanas",
        "recurrence_monthly": "Mensal",
        "recurrence_yearly": "Anual",
        "this_month": "Este mês",
        "last_month": "Mês passado",
        "last_3_months": "Últimos 3 meses",
        "last_6_months": "Últimos 6 meses",
        "this_year": "Este ano",
        "custom_range": "Período personalizado",
        "rollover_positive": "Orçamento não usado transferido",
        "rollover_negative": "Gasto excedente transferido",
        "rollover_none": "Sem transferência",
        "subscription_payment": "Pagamento de assinatura",
        "budget_alert_title": "Alerta de orçamento",
        "budget_alert_body": "Você usou {percent}% do seu orçamento. Restam {remaining}.",
        "budget_exceeded_body": "Você ultrapassou seu orçamento mensal.",
        "persistence_unavailable": "Não foi possível salvar seus dados. Tente novamente.",
        "premium_required": "Este recurso faz parte do BudgetPulse Premium.",
    },
}

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "en": ("January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December"),
    "fr": ("janvier", "février", "mars", "avril", "mai", "juin", "juillet",
           "août", "septembre", "octobre", "novembre", "décembre"),
    "es": ("enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
           "agosto", "septiembre", "octubre", "noviembre", "diciembre"),
    "pt": ("janeiro", "fevereiro", "março", "abril", "maio", "junho", "julho",
           "agosto", "setembro", "outubro", "novembro", "dezembro"),
}


def translate(key: str, language: Optional[str] = None, **params) -> str:
    """
    Look up a message, falling back to English and then to the key itself.
    """
    language = language if language in MESSAGES else DEFAULT_LANGUAGE
    template = MESSAGES[language].get(key) or MESSAGES[DEFAULT_LANGUAGE].get(key, key)
    return template.format(**params) if params else template


def category_label(category: ExpenseCategory, language: Optional[str] = None) -> str:
    return translate(f"category_{category.value}", language)


def income_category_label(category: IncomeCategory, language: Optional[str] = None) -> str:
    return translate(f"income_{category.value}", language)


def recurrence_label(recurrence: RecurrenceType, language: Optional[str] = None) -> str:
    return translate(f"recurrence_{recurrence.value}", language)


# Grouping separator, decimal separator, symbol goes after the number
_NUMBER_STYLES = {
    CurrencyCode.USD: (",", ".", False),
    CurrencyCode.GBP: (",", ".", False),
    CurrencyCode.CAD: (",", ".", False),
    CurrencyCode.MXN: (",", ".", False),
    CurrencyCode.EUR: (" ", ",", True),
}


def format_currency(amount: Decimal, currency: CurrencyCode) -> str:
    """
    Format an amount the way the currency's home locale writes it.

    >>> format_currency(Decimal("1234.5"), CurrencyCode.USD)
    '$1,234.50'
    >>> format_currency(Decimal("-12"), CurrencyCode.EUR)
    '-12,00 €'
    """
    group, decimal_sep, symbol_after = _NUMBER_STYLES[currency]
    value = quantize_amount(amount)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}"
    text = text.replace(",", "\x00").replace(".", decimal_sep).replace("\x00", group)
    if symbol_after:
        return f"{sign}{text} {currency.symbol}"
    return f"{sign}{currency.symbol}{text}"


def format_month_year(day: date, language: Optional[str] = None) -> str:
    language = language if language in MONTH_NAMES else DEFAULT_LANGUAGE
    month = MONTH_NAMES[language][day.month - 1]
    if language == "en":
        return f"{month} {day.year}"
    return f"{month} {day.year}".capitalize()
