"""
Streamlit Frontend for FinTrack

The user interface over the finance core. It only lays out what the
core computes:

- SessionState decides who is logged in
- MutationCoordinator sends every change and keeps the lists in step
- ViewBuilder derives the numbers shown on each page

Run with:  streamlit run app/main.py
"""

import asyncio
from datetime import date

import streamlit as st

from fintrack.aggregation import (
    categories_of_type,
    describe_balance,
    format_currency,
    format_progress,
)
from fintrack.config import get_settings, validate_all_settings
from fintrack.models import EntryType, NotificationLevel
from fintrack.orchestrator import AppComponents, create_app_components
from fintrack.services.gateway import ValidationError
from fintrack.validation import parse_amount


st.set_page_config(
    page_title="FinTrack",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_components() -> AppComponents:
    """One set of components per browser session."""
    if "components" not in st.session_state:
        components = create_app_components()
        run_async(components.session.start())
        if components.session.is_authenticated:
            run_async(components.coordinator.refresh_all())
        st.session_state.components = components
    return st.session_state.components


def show_notifications(components: AppComponents) -> None:
    for notification in components.notifier.drain():
        if notification.level == NotificationLevel.ERROR:
            st.error(f"**{notification.title}**: {notification.message}")
        elif notification.level == NotificationLevel.WARNING:
            st.warning(f"**{notification.title}**: {notification.message}")
        else:
            st.toast(f"{notification.title}: {notification.message}")


def main():
    """Main application entry point."""
    components = get_components()
    show_notifications(components)

    if not components.session.is_authenticated:
        render_auth_page(components)
        return

    user = components.session.user
    st.sidebar.title("💰 FinTrack")
    st.sidebar.markdown(f"Logged in as **{user.name}**")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "🏷️ Categories", "💸 Transactions", "🎯 Goals", "📈 Investments", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Refresh from server"):
        run_async(components.coordinator.refresh_all())
        st.rerun()
    if st.sidebar.button("🚪 Log out"):
        components.session.logout()
        st.rerun()

    if page == "📊 Dashboard":
        render_dashboard_page(components)
    elif page == "🏷️ Categories":
        render_categories_page(components)
    elif page == "💸 Transactions":
        render_transactions_page(components)
    elif page == "🎯 Goals":
        render_goals_page(components)
    elif page == "📈 Investments":
        render_investments_page(components)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_auth_page(components: AppComponents):
    st.title("💰 FinTrack")
    login_tab, register_tab = st.tabs(["Log in", "Create account"])

    with login_tab:
        with st.form("login"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in", type="primary"):
                if run_async(components.session.login(email, password)):
                    run_async(components.coordinator.refresh_all())
                st.rerun()

    with register_tab:
        with st.form("register"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            if st.form_submit_button("Create account"):
                run_async(components.session.register(name, email, password))
                st.rerun()


def render_dashboard_page(components: AppComponents):
    st.title("📊 Dashboard")
    summary = components.views.dashboard()

    col1, col2, col3 = st.columns(3)
    col1.metric("Balance", describe_balance(summary))
    col2.metric("Income", format_currency(summary.total_income))
    col3.metric("Expenses", format_currency(summary.total_expense))

    st.subheader("Recent transactions")
    if not summary.recent:
        st.info("No transactions yet.")
    for row in summary.recent:
        st.markdown(
            f"**{row.description or row.category_name}** · {row.category_name} · "
            f"{row.display_date} · `{row.display_amount}`"
        )


def render_categories_page(components: AppComponents):
    st.title("🏷️ Categories")

    with st.form("new_category", clear_on_submit=True):
        name = st.text_input("Name")
        entry_type = st.selectbox(
            "Type",
            options=list(EntryType),
            format_func=lambda x: x.label,
        )
        if st.form_submit_button("Create category", type="primary"):
            run_async(components.coordinator.create_category(name, entry_type))
            st.rerun()

    categories = components.coordinator.mirror.categories
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Income")
        for category in categories_of_type(categories, EntryType.INCOME):
            st.markdown(f"- {category.name}")
    with col2:
        st.subheader("Expense")
        for category in categories_of_type(categories, EntryType.EXPENSE):
            st.markdown(f"- {category.name}")


def render_transactions_page(components: AppComponents):
    st.title("💸 Transactions")
    coordinator = components.coordinator

    entry_type = st.radio(
        "Type",
        options=list(EntryType),
        format_func=lambda x: x.label,
        horizontal=True,
    )
    choices = categories_of_type(coordinator.mirror.categories, entry_type)

    with st.form("new_transaction", clear_on_submit=True):
        amount_text = st.text_input("Amount", placeholder="0,00")
        category = st.selectbox(
            "Category",
            options=choices,
            format_func=lambda c: c.name,
        )
        when = st.date_input("Date", value=date.today())
        description = st.text_input("Description")
        if st.form_submit_button("Add transaction", type="primary"):
            if category is None:
                st.error(f"Create a {entry_type.label.lower()} category first.")
            else:
                try:
                    amount = parse_amount(amount_text)
                except ValidationError as e:
                    st.error(str(e))
                else:
                    run_async(coordinator.create_transaction(
                        amount, entry_type, category.id, when, description
                    ))
                    st.rerun()

    st.markdown("---")
    rows = components.views.transactions()
    if not rows:
        st.info("No transactions yet.")
    for row in rows:
        col1, col2 = st.columns([5, 1])
        col1.markdown(
            f"**{row.description or '-'}** · {row.category_name} · "
            f"{row.display_date} · `{row.display_amount}`"
        )
        if col2.button("Undo", key=f"undo_{row.id}"):
            run_async(coordinator.undo_transaction(row.id))
            st.rerun()


def render_goals_page(components: AppComponents):
    st.title("🎯 Goals")
    coordinator = components.coordinator

    with st.expander("➕ New goal"):
        with st.form("new_goal", clear_on_submit=True):
            description = st.text_input("Description", placeholder="e.g. Trip to Europe")
            target_text = st.text_input("Target amount", placeholder="0,00")
            deadline = st.date_input("Deadline")
            kind = st.text_input("Kind", placeholder="e.g. Leisure, Education, Emergency")
            if st.form_submit_button("Create goal", type="primary"):
                try:
                    target = parse_amount(target_text, field="target amount", allow_zero=False)
                except ValidationError as e:
                    st.error(str(e))
                else:
                    run_async(coordinator.create_goal(description, target, deadline, kind))
                    st.rerun()

    cards = components.views.goals()
    if not cards:
        st.info("Set your financial goals and track your progress.")
    for card in cards:
        goal = card.goal
        st.subheader(goal.description)
        st.caption(goal.kind)
        st.progress(card.progress / 100, text=format_progress(card.progress))
        st.markdown(
            f"{format_currency(goal.current_amount)} of {format_currency(goal.target_amount)}"
            f" · {card.status_label}"
        )
        if card.can_deposit:
            with st.form(f"deposit_{goal.id}", clear_on_submit=True):
                deposit_text = st.text_input("Deposit amount", placeholder="0,00")
                if st.form_submit_button("Deposit"):
                    try:
                        amount = parse_amount(deposit_text, field="deposit", allow_zero=False)
                    except ValidationError as e:
                        st.error(str(e))
                    else:
                        run_async(coordinator.deposit_to_goal(goal.id, amount))
                        st.rerun()
        st.markdown("---")


def render_investments_page(components: AppComponents):
    st.title("📈 Investment options")

    breakdown = components.views.risk_breakdown()
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Low risk", breakdown.low)
    col2.metric("Medium risk", breakdown.medium)
    col3.metric("High risk", breakdown.high)
    col4.metric("Total", breakdown.total)

    cards = components.views.investments()
    if not cards:
        st.info("Investment options will appear here when available.")
    for card in cards:
        investment = card.investment
        st.subheader(investment.name)
        st.caption(investment.description)
        st.markdown(
            f"Monthly yield: **{card.monthly_rate_label}** · "
            f"Risk: **{investment.risk_level or card.risk.value}**"
        )
        st.markdown(
            f"{format_currency(card.principal)} after 12 months: **{format_currency(card.projected_value)}** "
            f"(+{format_currency(card.projected_return)})"
        )
        st.markdown("---")

    st.warning(
        "These investments are informational only. Past returns do not "
        "guarantee future results."
    )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    sections = [
        ("Ledger backend", "gateway"),
        ("Application", "app"),
    ]
    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if status.get("gateway") and status.get("app"):
        settings = get_settings()
        st.markdown("---")
        st.markdown(f"**Environment:** {settings.app.app_environment}")
        st.markdown(f"**Backend:** `{settings.gateway.base_url}`")
        st.markdown(f"**Log level:** {settings.app.effective_log_level}")

    st.markdown(
        "Settings are read from `FINTRACK_*` environment variables or a `.env` file."
    )


if __name__ == "__main__":
    main()
