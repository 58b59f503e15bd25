"""
Streamlit Frontend for BudgetPulse

The screens people use day to day: a dashboard, expense and income
entry, savings goals, subscriptions, reports and settings.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every change is saved immediately
3. A failed save is shown, never hidden or retried behind the user's back
4. Premium screens explain what is locked instead of disappearing
"""

from datetime import date
from decimal import Decimal

import pandas as pd
import streamlit as st

from budgetpulse.config import get_settings
from budgetpulse.features import Feature
from budgetpulse.i18n import (
    category_label,
    format_currency,
    format_month_year,
    income_category_label,
    recurrence_label,
    translate,
)
from budgetpulse.ledger import DateFilter, FeatureLockedError, SearchKind, expenses_to_csv
from budgetpulse.ledger.store import LedgerStore
from budgetpulse.models.records import (
    CurrencyCode,
    ExpenseCategory,
    IncomeCategory,
    RecurrenceType,
    SavingsGoal,
    Subscription,
)
from budgetpulse.orchestrator import EntryFlow, create_app_components
from budgetpulse.services.storage import PersistenceUnavailableError


SEARCH_RESULTS_PER_SECTION = 10


# Page configuration
st.set_page_config(
    page_title="BudgetPulse",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except OSError as e:
        st.error(f"Failed to open your data folder: {e}")
        return create_app_components(use_storage=False)


def language() -> str:
    return st.session_state.get("language", "en")


def money(store: LedgerStore, amount: Decimal) -> str:
    return format_currency(amount, store.budget.currency)


def save_failed():
    st.markdown(f"""
    <div class="error-box">
        <h4>💾 Not saved</h4>
        <p>{translate("persistence_unavailable", language())}</p>
    </div>
    """, unsafe_allow_html=True)


def locked(feature: Feature):
    st.markdown(f"""
    <div class="warning-box">
        <h4>🔒 {feature.value.replace("_", " ").title()}</h4>
        <p>{translate("premium_required", language())}</p>
    </div>
    """, unsafe_allow_html=True)


def main():
    """Main application entry point."""
    store, entry_flow, _ = get_components()

    if "language" not in st.session_state:
        st.session_state.language = get_settings().app.language

    if store.persistence_error:
        save_failed()

    # Sidebar navigation
    st.sidebar.title("💰 BudgetPulse")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "🏠 Dashboard",
            "🧾 Expenses",
            "💵 Income",
            "🎯 Savings Goals",
            "🔁 Subscriptions",
            "🔍 Search",
            "📊 Reports",
            "⚙️ Settings",
        ],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(format_month_year(date.today(), language()))

    if page == "🏠 Dashboard":
        render_dashboard_page(store)
    elif page == "🧾 Expenses":
        render_expenses_page(store, entry_flow)
    elif page == "💵 Income":
        render_income_page(store, entry_flow)
    elif page == "🎯 Savings Goals":
        render_savings_page(store, entry_flow)
    elif page == "🔁 Subscriptions":
        render_subscriptions_page(store, entry_flow)
    elif page == "🔍 Search":
        render_search_page(store)
    elif page == "📊 Reports":
        render_reports_page(store, entry_flow)
    elif page == "⚙️ Settings":
        render_settings_page(store, entry_flow)


def render_dashboard_page(store: LedgerStore):
    """Render the monthly overview."""
    st.title("🏠 Dashboard")
    lang = language()

    spent = store.total_spent_this_month()
    limit = store.effective_limit()
    progress = store.budget_progress()

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown("**Spent this month**")
        st.markdown(f'<div class="big-number">{money(store, spent)}</div>', unsafe_allow_html=True)
    with col2:
        st.markdown("**Remaining**")
        st.markdown(
            f'<div class="big-number">{money(store, store.remaining_with_rollover())}</div>',
            unsafe_allow_html=True,
        )
    with col3:
        st.markdown("**Net balance**")
        st.markdown(
            f'<div class="big-number">{money(store, store.net_balance_this_month())}</div>',
            unsafe_allow_html=True,
        )

    st.progress(progress, text=f"{progress:.0%} of {money(store, limit)}")
    if store.is_over_budget():
        st.error(translate("budget_exceeded_body", lang))

    if store.budget.rollover_enabled:
        st.caption(
            f"{translate(store.rollover_status(), lang)}: "
            f"{money(store, store.budget.rollover_amount)}"
        )

    st.markdown("---")
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("By category")
        totals = store.expenses_by_category()
        if totals:
            for category, amount in sorted(totals.items(), key=lambda item: -item[1]):
                st.markdown(f"- **{category_label(category, lang)}**: {money(store, amount)}")
        else:
            st.info("No expenses this month yet.")

    with col2:
        st.subheader("Recent expenses")
        for expense in store.recent_expenses():
            st.markdown(
                f"- {expense.date.strftime('%d %b')} · {expense.title} · "
                f"{money(store, expense.amount)}"
            )

    reminders = store.due_reminders()
    if reminders:
        st.markdown("---")
        st.subheader("🔔 Upcoming payments")
        for reminder in reminders:
            when = "today" if reminder.days_until == 0 else f"in {reminder.days_until} days"
            st.markdown(
                f"- **{reminder.title}**: {money(store, reminder.amount)} "
                f"on {reminder.due_date.strftime('%d %b')} ({when})"
            )


def render_expenses_page(store: LedgerStore, entry_flow: EntryFlow):
    """Render expense entry and the expense list."""
    st.title("🧾 Expenses")
    lang = language()

    with st.form("expense_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            title = st.text_input("Title *")
            amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
            category = st.selectbox(
                "Category *",
                options=list(ExpenseCategory),
                format_func=lambda c: f"{category_label(c, lang)}",
            )
        with col2:
            expense_date = st.date_input("Date *", value=date.today())
            recurrence = st.selectbox(
                "Repeats",
                options=[None] + list(RecurrenceType),
                format_func=lambda r: "Never" if r is None else recurrence_label(r, lang),
            )
            next_due = st.date_input("Next due date", value=None)
        notes = st.text_area("Notes (optional)")
        submitted = st.form_submit_button("💾 Save Expense", type="primary")

    if submitted:
        outcome = entry_flow.submit_expense({
            "title": title,
            "amount": Decimal(str(round(amount, 2))),
            "category": category,
            "date": expense_date,
            "recurrence": recurrence,
            "next_due_date": next_due if recurrence else None,
            "notes": notes or None,
        })
        if not outcome.accepted:
            st.error(outcome.message)
        elif not outcome.persisted:
            save_failed()
        else:
            st.success(f"Saved {outcome.record.title}")
            if outcome.validation and outcome.validation.warnings:
                st.warning(outcome.message)
        if outcome.alert:
            if outcome.alert.is_exceeded:
                st.error(translate("budget_exceeded_body", lang))
            else:
                st.warning(translate(
                    "budget_alert_body",
                    lang,
                    percent=outcome.alert.percent_used,
                    remaining=money(store, outcome.alert.remaining),
                ))

    recurring = store.recurring_expenses()
    if recurring:
        st.markdown("---")
        st.subheader("Recurring")
        for expense in recurring:
            col1, col2, col3 = st.columns([3, 1, 1])
            due = expense.next_due_date.strftime("%d %b %Y") if expense.next_due_date else "not set"
            col1.markdown(
                f"**{expense.title}** · {money(store, expense.amount)} · "
                f"{recurrence_label(expense.recurrence, lang)} · next {due}"
            )
            try:
                if col2.button("✅ Paid", key=f"paid-{expense.id}"):
                    store.mark_recurring_expense_paid(expense.id)
                    st.rerun()
                if col3.button("⏭️ Skip", key=f"skip-{expense.id}"):
                    store.skip_recurring_expense(expense.id)
                    st.rerun()
            except PersistenceUnavailableError:
                save_failed()

    st.markdown("---")
    st.subheader("This month")
    for expense in store.this_month_expenses():
        col1, col2 = st.columns([5, 1])
        col1.markdown(
            f"{expense.date.strftime('%d %b')} · **{expense.title}** · "
            f"{category_label(expense.category, lang)} · {money(store, expense.amount)}"
        )
        if col2.button("🗑️", key=f"delete-{expense.id}"):
            if entry_flow.persist(lambda: store.delete_expense(expense.id)):
                st.rerun()
            save_failed()


def render_income_page(store: LedgerStore, entry_flow: EntryFlow):
    """Render income entry and the income list."""
    st.title("💵 Income")
    lang = language()

    with st.form("income_form", clear_on_submit=True):
        title = st.text_input("Title *")
        amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
        category = st.selectbox(
            "Category *",
            options=list(IncomeCategory),
            format_func=lambda c: income_category_label(c, lang),
        )
        income_date = st.date_input("Date *", value=date.today())
        submitted = st.form_submit_button("💾 Save Income", type="primary")

    if submitted:
        outcome = entry_flow.submit_income({
            "title": title,
            "amount": Decimal(str(round(amount, 2))),
            "category": category,
            "date": income_date,
        })
        if not outcome.accepted:
            st.error(outcome.message)
        elif not outcome.persisted:
            save_failed()
        else:
            st.success(f"Saved {outcome.record.title}")

    st.markdown("---")
    st.metric("Income this month", money(store, store.total_income_this_month()))
    for income in store.recent_incomes(limit=20):
        col1, col2 = st.columns([5, 1])
        col1.markdown(
            f"{income.date.strftime('%d %b')} · **{income.title}** · "
            f"{income_category_label(income.category, lang)} · {money(store, income.amount)}"
        )
        if col2.button("🗑️", key=f"delete-income-{income.id}"):
            if entry_flow.persist(lambda: store.delete_income(income.id)):
                st.rerun()
            save_failed()


def render_savings_page(store: LedgerStore, entry_flow: EntryFlow):
    """Render savings goals and contributions."""
    st.title("🎯 Savings Goals")
    st.metric("Total saved", money(store, store.total_savings()))

    with st.expander("➕ New goal"):
        with st.form("goal_form", clear_on_submit=True):
            title = st.text_input("Goal name *")
            target = st.number_input("Target amount *", min_value=0.01, step=10.0, format="%.2f")
            target_date = st.date_input("Target date (optional)", value=None)
            submitted = st.form_submit_button("Create goal", type="primary")
        if submitted and title:
            try:
                entry_flow.create_savings_goal(SavingsGoal(
                    title=title,
                    target_amount=Decimal(str(round(target, 2))),
                    target_date=target_date,
                ))
                st.rerun()
            except FeatureLockedError:
                locked(Feature.UNLIMITED_SAVINGS_GOALS)
            except PersistenceUnavailableError:
                save_failed()

    for goal in store.savings_goals:
        st.markdown("---")
        st.subheader(("✅ " if goal.is_completed else "") + goal.title)
        st.progress(goal.progress, text=(
            f"{money(store, goal.current_amount)} of {money(store, goal.target_amount)}"
        ))
        if goal.target_date and not goal.is_completed:
            st.caption(
                f"{goal.days_remaining()} days left · suggested "
                f"{money(store, goal.suggested_monthly_contribution())} per month"
            )

        col1, col2 = st.columns([3, 1])
        amount = col1.number_input(
            "Add contribution", min_value=0.0, step=5.0, format="%.2f", key=f"contrib-{goal.id}"
        )
        if col2.button("➕ Add", key=f"add-{goal.id}") and amount > 0:
            try:
                store.add_contribution(goal.id, Decimal(str(round(amount, 2))))
                st.rerun()
            except PersistenceUnavailableError:
                save_failed()

        if goal.contributions:
            with st.expander("Contributions"):
                for contribution in sorted(goal.contributions, key=lambda c: c.date, reverse=True):
                    c1, c2 = st.columns([5, 1])
                    c1.markdown(
                        f"{contribution.date.strftime('%d %b %Y')} · "
                        f"{money(store, contribution.amount)}"
                    )
                    if c2.button("🗑️", key=f"remove-{contribution.id}"):
                        if entry_flow.persist(
                            lambda: store.remove_contribution(goal.id, contribution.id)
                        ):
                            st.rerun()
                        save_failed()

        if st.button("Delete goal", key=f"delete-goal-{goal.id}"):
            if entry_flow.persist(lambda: store.delete_savings_goal(goal.id)):
                st.rerun()
            save_failed()


def render_subscriptions_page(store: LedgerStore, entry_flow: EntryFlow):
    """Render the subscription tracker."""
    st.title("🔁 Subscriptions")
    lang = language()

    if not entry_flow.features.can_access(Feature.SUBSCRIPTION_TRACKER):
        locked(Feature.SUBSCRIPTION_TRACKER)
        return

    col1, col2 = st.columns(2)
    col1.metric("Per month", money(store, store.total_monthly_subscriptions()))
    col2.metric("Per year", money(store, store.total_yearly_subscriptions()))

    for subscription in store.overdue_subscriptions():
        st.error(f"{subscription.name} is overdue since {subscription.next_billing_date}")

    with st.expander("➕ New subscription"):
        with st.form("subscription_form", clear_on_submit=True):
            name = st.text_input("Name *")
            amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
            recurrence = st.selectbox(
                "Billed", options=list(RecurrenceType),
                index=list(RecurrenceType).index(RecurrenceType.MONTHLY),
                format_func=lambda r: recurrence_label(r, lang),
            )
            category = st.selectbox(
                "Category", options=list(ExpenseCategory),
                index=list(ExpenseCategory).index(ExpenseCategory.UTILITIES),
                format_func=lambda c: category_label(c, lang),
            )
            next_billing = st.date_input("Next billing date", value=date.today())
            submitted = st.form_submit_button("Add subscription", type="primary")
        if submitted and name:
            try:
                entry_flow.create_subscription(Subscription(
                    name=name,
                    amount=Decimal(str(round(amount, 2))),
                    recurrence=recurrence,
                    category=category,
                    next_billing_date=next_billing,
                ))
                st.rerun()
            except PersistenceUnavailableError:
                save_failed()

    st.markdown("---")
    today = date.today()
    for subscription in sorted(store.subscriptions, key=lambda s: s.next_billing_date):
        col1, col2, col3 = st.columns([4, 1, 1])
        status = "" if subscription.is_active else " (paused)"
        col1.markdown(
            f"**{subscription.name}**{status} · "
            f"{money(store, subscription.amount)} {recurrence_label(subscription.recurrence, lang)} · "
            f"in {subscription.days_until_billing(today)} days"
        )
        try:
            if col2.button("✅ Paid", key=f"sub-paid-{subscription.id}"):
                store.mark_subscription_paid(subscription.id)
                st.rerun()
            label = "⏸️ Pause" if subscription.is_active else "▶️ Resume"
            if col3.button(label, key=f"sub-toggle-{subscription.id}"):
                store.toggle_subscription_active(subscription.id)
                st.rerun()
        except PersistenceUnavailableError:
            save_failed()


def render_search_page(store: LedgerStore):
    """Render search across every kind of record."""
    st.title("🔍 Search")
    lang = language()

    query = st.text_input("Search", placeholder="Title, category or notes")
    kind = st.radio(
        "Show",
        options=list(SearchKind),
        format_func=lambda k: k.value.title(),
        horizontal=True,
    )
    if not query.strip():
        st.info("Type to search expenses, income, goals and subscriptions.")
        return

    results = store.search(query, kind, language=lang)
    if results.is_empty:
        st.warning(f"No results for \"{results.query}\".")
        return

    def section(title: str, rows: list[str]):
        if not rows:
            return
        st.subheader(f"{title} ({len(rows)})")
        for row in rows[:SEARCH_RESULTS_PER_SECTION]:
            st.markdown(f"- {row}")
        if len(rows) > SEARCH_RESULTS_PER_SECTION:
            st.caption(f"+{len(rows) - SEARCH_RESULTS_PER_SECTION} more")

    section("Expenses", [
        f"{e.date.strftime('%d %b %Y')} · **{e.title}** · "
        f"{category_label(e.category, lang)} · {money(store, e.amount)}"
        for e in results.expenses
    ])
    section("Income", [
        f"{i.date.strftime('%d %b %Y')} · **{i.title}** · {money(store, i.amount)}"
        for i in results.incomes
    ])
    section("Savings goals", [
        f"**{g.title}** · {money(store, g.current_amount)} of {money(store, g.target_amount)}"
        for g in results.savings_goals
    ])
    section("Subscriptions", [
        f"**{s.name}** · {money(store, s.amount)} {recurrence_label(s.recurrence, lang)}"
        for s in results.subscriptions
    ])


def render_reports_page(store: LedgerStore, entry_flow: EntryFlow):
    """Render charts and export."""
    st.title("📊 Reports")
    lang = language()

    if not entry_flow.features.can_access(Feature.REPORTS):
        locked(Feature.REPORTS)
        return

    period = st.selectbox(
        "Period",
        options=list(DateFilter),
        format_func=lambda f: translate(f.value, lang),
    )

    col1, col2, col3 = st.columns(3)
    col1.metric("Spent", money(store, store.total_spent_for(period)))
    col2.metric("Income", money(store, store.total_income_for(period)))
    col3.metric("Average per day", money(store, store.average_daily_spending()))

    breakdown = store.category_breakdown(period)
    if breakdown:
        st.subheader("By category")
        st.bar_chart(pd.DataFrame(
            {"Amount": [float(row.amount) for row in breakdown]},
            index=[category_label(row.category, lang) for row in breakdown],
        ))

    st.subheader("Daily spending")
    daily = store.daily_spending()
    st.line_chart(pd.DataFrame(
        {"Amount": [float(d.amount) for d in daily]},
        index=[d.day for d in daily],
    ))

    st.subheader("Monthly spending")
    monthly = store.monthly_spending()
    st.bar_chart(pd.DataFrame(
        {"Amount": [float(m.amount) for m in monthly]},
        index=[format_month_year(m.month, lang) for m in monthly],
    ))

    st.markdown("---")
    if entry_flow.features.can_access(Feature.EXPORT):
        st.download_button(
            "⬇️ Export CSV",
            data=expenses_to_csv(store.expenses_for(period), lang),
            file_name=f"budgetpulse-{period.value}.csv",
            mime="text/csv",
        )
    else:
        locked(Feature.EXPORT)


def render_settings_page(store: LedgerStore, entry_flow: EntryFlow):
    """Render budget and app settings."""
    st.title("⚙️ Settings")
    lang = language()
    features = entry_flow.features

    st.markdown("### Budget")
    try:
        limit = st.number_input(
            "Monthly limit",
            min_value=0.0,
            value=float(store.budget.monthly_limit),
            step=50.0,
            format="%.2f",
        )
        if Decimal(str(limit)).quantize(Decimal("0.01")) != store.budget.monthly_limit:
            store.set_monthly_limit(Decimal(str(round(limit, 2))))

        currency = st.selectbox(
            "Currency",
            options=list(CurrencyCode),
            index=list(CurrencyCode).index(store.budget.currency),
            format_func=lambda c: f"{c.value} ({c.symbol})",
        )
        if currency != store.budget.currency:
            store.set_currency(currency)

        if features.can_access(Feature.BUDGET_ROLLOVER):
            rollover = st.checkbox("Carry unused budget over", value=store.budget.rollover_enabled)
            if rollover != store.budget.rollover_enabled:
                store.set_rollover_enabled(rollover)
                st.rerun()
            if store.budget.rollover_enabled:
                st.caption(
                    f"{translate(store.rollover_status(), lang)}: "
                    f"{money(store, store.budget.rollover_amount)}"
                )
                if st.button("Reset rollover"):
                    store.reset_rollover()
                    st.rerun()
        else:
            locked(Feature.BUDGET_ROLLOVER)

        st.markdown("### Category limits")
        if features.can_access(Feature.CATEGORY_BUDGETS):
            for category in ExpenseCategory:
                current = store.budget.category_limits.get(category)
                value = st.number_input(
                    category_label(category, lang),
                    min_value=0.0,
                    value=float(current) if current is not None else 0.0,
                    step=10.0,
                    format="%.2f",
                    key=f"limit-{category.value}",
                    help="0 means no limit",
                )
                new_limit = Decimal(str(value)).quantize(Decimal("0.01")) if value > 0 else None
                if new_limit != current:
                    store.set_category_limit(category, new_limit)
        else:
            locked(Feature.CATEGORY_BUDGETS)
    except PersistenceUnavailableError:
        save_failed()

    st.markdown("---")
    st.markdown("### Language")
    st.session_state.language = st.selectbox(
        "Interface language",
        options=["en", "fr", "es", "pt"],
        index=["en", "fr", "es", "pt"].index(lang),
    )

    st.markdown("---")
    st.markdown("### Data")
    col1, col2 = st.columns(2)
    try:
        if col1.button("Load sample data"):
            store.load_sample_data()
            st.rerun()
        if col2.button("🗑️ Delete everything"):
            store.reset_all()
            st.rerun()
    except PersistenceUnavailableError:
        save_failed()


if __name__ == "__main__":
    main()
